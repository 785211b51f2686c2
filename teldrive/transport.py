"""Shared HTTP client construction and the optional retry layer."""

import asyncio
from typing import Optional

import httpx

from common.constants import COOKIE_NAME
from common.logging_config import get_logger
from teldrive.config import Config
from teldrive.session import parse_cookie

logger = get_logger(__name__)


class RetryTransport(httpx.AsyncBaseTransport):
    """
    Transport wrapper that retries 5xx responses and network failures
    with exponential backoff.

    With max_retries=0 it forwards every request exactly once.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        max_retries: int = 0,
        backoff: float = 2,
    ):
        self._transport = transport
        self.max_retries = max_retries
        self.backoff = backoff

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._transport.handle_async_request(request)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                if attempt >= self.max_retries:
                    logger.error(
                        f"Network error (max retries exceeded): {request.method} {request.url.path} error={e}"
                    )
                    raise
                delay = self.backoff ** attempt
                logger.warning(
                    f"Network error (attempt {attempt + 1}/{self.max_retries + 1}): "
                    f"{request.method} {request.url.path} error={type(e).__name__}, retrying in {delay}s"
                )
                await asyncio.sleep(delay)
                continue

            if response.status_code >= 500 and attempt < self.max_retries:
                delay = self.backoff ** attempt
                logger.warning(
                    f"Server error (attempt {attempt + 1}/{self.max_retries + 1}): "
                    f"{request.method} {request.url.path} status={response.status_code}, retrying in {delay}s"
                )
                await response.aclose()
                await asyncio.sleep(delay)
                continue

            return response

        raise RuntimeError("unreachable")

    async def aclose(self) -> None:
        await self._transport.aclose()


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(f"Response received: {request.method} {request.url.path} status={response.status_code}")


def build_client(config: Config, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Create the HTTP client shared by every operation of one storage instance.

    Args:
        config: Validated driver configuration
        transport: Inner transport (tests pass an httpx.MockTransport)

    Returns:
        AsyncClient with base URL, access token cookie and timeout set

    Raises:
        AuthError: If the configured cookie is malformed
    """
    token = parse_cookie(config.get_cookie())
    retry = config.get_retry_config()
    inner = transport if transport is not None else httpx.AsyncHTTPTransport()

    client = httpx.AsyncClient(
        base_url=config.get_base_url(),
        timeout=config.get_timeout(),
        transport=RetryTransport(
            inner,
            max_retries=retry['max_retries'],
            backoff=retry['retry_backoff_multiplier'],
        ),
        cookies={COOKIE_NAME: token},
        event_hooks={'response': [_log_response]},
    )
    logger.info(f"Initialized HTTP client [base_url={config.get_base_url()}]")
    return client
