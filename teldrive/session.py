"""Session bootstrap: credential parsing, user lookup and root folder resolution."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from common.constants import COOKIE_PREFIX
from common.logging_config import get_logger
from teldrive.exceptions import AuthError, NotFoundError
from teldrive.metadata_client import MetadataClient
from teldrive.schemas import SessionResponse

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionInfo:
    """
    Identity of the authenticated user and the id of their root folder.
    """
    user_id: int
    user_name: str
    root_id: str


def parse_cookie(cookie: str) -> str:
    """
    Extract the access token from a cookie string.

    Args:
        cookie: Credential in the form "access_token=<token>"

    Returns:
        The token with the prefix stripped

    Raises:
        AuthError: If the prefix is missing or the token is empty
    """
    if not cookie or not cookie.startswith(COOKIE_PREFIX):
        raise AuthError(f"cookie must start with '{COOKIE_PREFIX}'")
    token = cookie[len(COOKIE_PREFIX):].strip()
    if not token:
        raise AuthError("cookie carries an empty access token")
    return token


async def bootstrap_session(client: httpx.AsyncClient) -> SessionInfo:
    """
    Validate the session behind the client's cookie and resolve the root folder.

    Args:
        client: Shared client already carrying the access token

    Returns:
        SessionInfo for the authenticated user

    Raises:
        AuthError: If the session lookup fails or yields no user
        NotFoundError: If no root folder exists
        RemoteError: If the root lookup returns a non-success status
    """
    response = await client.get('/api/auth/session')
    if not response.is_success:
        raise AuthError(f"failed to get session (status {response.status_code}): {response.text}")

    try:
        session = SessionResponse.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise AuthError(f"invalid session response: {e}") from e

    if not session.user_id:
        raise AuthError("invalid session")

    roots = await MetadataClient(client).find_root()
    if not roots:
        raise NotFoundError("couldn't find root directory")

    info = SessionInfo(user_id=session.user_id, user_name=session.user_name, root_id=roots[0].id)
    logger.info(f"Session established for user {info.user_name or info.user_id} [root_id={info.root_id}]")
    return info
