"""Tests for the retrying transport and client construction."""

import httpx
import pytest

from teldrive.config import Config
from teldrive.exceptions import AuthError
from teldrive.transport import RetryTransport, build_client


class FlakyHandler:
    """Handler that fails a fixed number of times before succeeding."""

    def __init__(self, failures, error=None, status=503):
        self.failures = failures
        self.error = error
        self.status = status
        self.calls = 0

    def __call__(self, request):
        self.calls += 1
        if self.calls <= self.failures:
            if self.error is not None:
                raise self.error('boom', request=request)
            return httpx.Response(self.status, text='unavailable')
        return httpx.Response(200, json={'ok': True})


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr('teldrive.transport.asyncio.sleep', fake_sleep)
    return delays


def make_client(handler, max_retries):
    transport = RetryTransport(httpx.MockTransport(handler), max_retries=max_retries, backoff=2)
    return httpx.AsyncClient(transport=transport, base_url='http://teldrive.test')


@pytest.mark.asyncio
async def test_no_retries_by_default():
    handler = FlakyHandler(failures=1)

    async with make_client(handler, max_retries=0) as client:
        response = await client.get('/x')

    assert response.status_code == 503
    assert handler.calls == 1


@pytest.mark.asyncio
async def test_retries_server_errors(no_sleep):
    handler = FlakyHandler(failures=2)

    async with make_client(handler, max_retries=3) as client:
        response = await client.get('/x')

    assert response.status_code == 200
    assert handler.calls == 3
    assert no_sleep == [1, 2]


@pytest.mark.asyncio
async def test_returns_last_server_error_when_exhausted():
    handler = FlakyHandler(failures=5, status=500)

    async with make_client(handler, max_retries=2) as client:
        response = await client.get('/x')

    assert response.status_code == 500
    assert handler.calls == 3


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    handler = FlakyHandler(failures=1, status=404)

    async with make_client(handler, max_retries=3) as client:
        response = await client.get('/x')

    assert response.status_code == 404
    assert handler.calls == 1


@pytest.mark.asyncio
async def test_retries_connection_errors():
    handler = FlakyHandler(failures=1, error=httpx.ConnectError)

    async with make_client(handler, max_retries=1) as client:
        response = await client.get('/x')

    assert response.status_code == 200
    assert handler.calls == 2


@pytest.mark.asyncio
async def test_connection_error_raised_when_exhausted():
    handler = FlakyHandler(failures=3, error=httpx.ReadTimeout)

    async with make_client(handler, max_retries=1) as client:
        with pytest.raises(httpx.ReadTimeout):
            await client.get('/x')

    assert handler.calls == 2


@pytest.mark.asyncio
async def test_build_client_sets_base_url_and_cookie():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200)

    config = Config(None, url='http://teldrive.test/', cookie='access_token=tok')
    config.validate()

    async with build_client(config, httpx.MockTransport(handler)) as client:
        await client.get('/api/auth/session')

    assert str(seen[0].url) == 'http://teldrive.test/api/auth/session'
    assert seen[0].headers['cookie'] == 'access_token=tok'


def test_build_client_rejects_malformed_cookie():
    config = Config(None, url='http://teldrive.test', cookie='tok')

    with pytest.raises(AuthError):
        build_client(config, httpx.MockTransport(lambda request: httpx.Response(200)))
