"""Tests for cookie parsing and session bootstrap."""

import httpx
import pytest

from teldrive.exceptions import AuthError, NotFoundError
from teldrive.session import bootstrap_session, parse_cookie


def make_client(fake_api):
    return httpx.AsyncClient(transport=fake_api.transport, base_url='http://teldrive.test')


def test_parse_cookie_strips_prefix():
    assert parse_cookie('access_token=abc.def') == 'abc.def'


@pytest.mark.parametrize('cookie', [
    '',
    'abc.def',
    'session=abc',
    'access_token=',
    'access_token=   ',
])
def test_parse_cookie_rejects_malformed(cookie):
    with pytest.raises(AuthError):
        parse_cookie(cookie)


@pytest.mark.asyncio
async def test_bootstrap_resolves_user_and_root(fake_api):
    async with make_client(fake_api) as client:
        info = await bootstrap_session(client)

    assert info.user_id == 42
    assert info.user_name == 'alice'
    assert info.root_id == 'root-id'

    find = fake_api.requests_to('GET', '/api/files')[0]
    assert find.url.params['parentId'] == 'nil'
    assert find.url.params['operation'] == 'find'
    assert find.url.params['name'] == 'root'
    assert find.url.params['type'] == 'folder'


@pytest.mark.asyncio
async def test_bootstrap_rejects_failed_session(fake_api):
    fake_api.session_status = 401

    async with make_client(fake_api) as client:
        with pytest.raises(AuthError):
            await bootstrap_session(client)

    assert fake_api.requests_to('GET', '/api/files') == []


@pytest.mark.asyncio
@pytest.mark.parametrize('user_id', [0, None])
async def test_bootstrap_rejects_missing_user(fake_api, user_id):
    fake_api.user_id = user_id

    async with make_client(fake_api) as client:
        with pytest.raises(AuthError, match='invalid session'):
            await bootstrap_session(client)


@pytest.mark.asyncio
async def test_bootstrap_requires_root_folder(fake_api):
    fake_api.root_items = []

    async with make_client(fake_api) as client:
        with pytest.raises(NotFoundError):
            await bootstrap_session(client)


@pytest.mark.asyncio
async def test_bootstrap_uses_first_root(fake_api):
    fake_api.root_items = [
        {'id': 'root-a', 'name': 'root', 'type': 'folder'},
        {'id': 'root-b', 'name': 'root', 'type': 'folder'},
    ]

    async with make_client(fake_api) as client:
        info = await bootstrap_session(client)

    assert info.root_id == 'root-a'
