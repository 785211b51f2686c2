"""Shared pytest fixtures for all tests."""

import json

import httpx
import pytest
import pytest_asyncio

from teldrive.config import Config
from teldrive.storage import TeldriveStorage


class FakeTeldrive:
    """
    In-memory stand-in for the Teldrive HTTP API, served through httpx.MockTransport.

    Failure knobs:
        session_status / user_id: session lookup outcome
        root_items: result of the root folder lookup
        chunk_failures: {partNo: status} rejected chunk uploads
        commit_status: status of file-type create requests
        cleanup_status / cleanup_error: outcome of upload session cleanup
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.user_id = 42
        self.session_status = 200
        self.root_items = [{'id': 'root-id', 'name': 'root', 'type': 'folder'}]
        self.entries: dict[str, dict] = {}
        self.chunk_failures: dict[int, int] = {}
        self.commit_status = 200
        self.cleanup_status = 200
        self.cleanup_error = False
        self.uploaded: list[tuple[int, bytes]] = []
        self.committed: list[dict] = []
        self.deleted_uploads: list[str] = []
        self._next_id = 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def add_entry(self, name: str, type: str = 'file', parent_id: str = 'root-id', size: int = 0) -> dict:
        entry = {
            'id': f'id-{self._next_id:04d}',
            'name': name,
            'type': type,
            'size': size,
            'mimeType': 'text/plain' if type == 'file' else None,
            'parentId': parent_id,
            'updatedAt': '2024-05-01T12:00:00Z',
        }
        self._next_id += 1
        self.entries[entry['id']] = entry
        return entry

    def requests_to(self, method: str, prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.startswith(prefix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        method = request.method
        params = request.url.params

        if path == '/api/auth/session':
            return httpx.Response(self.session_status, json={'userId': self.user_id, 'userName': 'alice'})

        if path == '/api/files' and method == 'GET':
            if params.get('operation') == 'find':
                return httpx.Response(200, json={'items': self.root_items})
            items = [e for e in self.entries.values() if e['parentId'] == params.get('parentId')]
            return httpx.Response(200, json={'items': items, 'meta': {'count': len(items)}})

        if path == '/api/files' and method == 'POST':
            body = json.loads(request.content)
            if body['type'] == 'file':
                self.committed.append(body)
                if self.commit_status != 200:
                    return httpx.Response(self.commit_status, text='commit rejected')
            entry = self.add_entry(body['name'], body['type'], body.get('parentId'), body.get('size', 0))
            return httpx.Response(200, json=entry)

        if path.startswith('/api/uploads/'):
            upload_id = path.rsplit('/', 1)[-1]
            if method == 'DELETE':
                if self.cleanup_error:
                    raise httpx.ConnectError('connection reset', request=request)
                self.deleted_uploads.append(upload_id)
                return httpx.Response(self.cleanup_status)
            part_no = int(params['partNo'])
            status = self.chunk_failures.get(part_no)
            if status:
                return httpx.Response(status, text=f'chunk {part_no} rejected')
            self.uploaded.append((part_no, request.content))
            return httpx.Response(200, json={
                'name': params['partName'],
                'partId': 1000 + part_no,
                'partNo': part_no,
                'size': len(request.content),
                'channelId': int(params['channelId']),
                'encrypted': params['encrypted'] == 'true',
                'salt': f'salt-{part_no}',
            })

        if path == '/api/files/move' and method == 'POST':
            body = json.loads(request.content)
            for file_id in body['ids']:
                self.entries[file_id]['parentId'] = body['destinationParent']
            return httpx.Response(200)

        if path == '/api/files/delete' and method == 'POST':
            for file_id in json.loads(request.content)['ids']:
                self.entries.pop(file_id, None)
            return httpx.Response(200)

        if path.endswith('/copy') and method == 'POST':
            source = self.entries[path.split('/')[3]]
            body = json.loads(request.content)
            entry = self.add_entry(body['newName'], source['type'], body['destination'], source['size'])
            return httpx.Response(200, json=entry)

        if path.startswith('/api/files/') and method == 'PATCH':
            file_id = path.rsplit('/', 1)[-1]
            if file_id not in self.entries:
                return httpx.Response(404, text='not found')
            self.entries[file_id]['name'] = json.loads(request.content)['name']
            return httpx.Response(200)

        return httpx.Response(404, text='no route')


@pytest.fixture
def fake_api():
    """Fresh fake Teldrive server per test."""
    return FakeTeldrive()


@pytest.fixture
def driver_config():
    """
    In-memory driver configuration pointing at the fake server.

    Returns:
        Config with 1 MiB chunks and sequential uploads
    """
    return Config(
        None,
        url='http://teldrive.test/',
        cookie='access_token=tok123',
        chunk_size=1,
        upload_concurrency=1,
        channel_id=7,
    )


@pytest_asyncio.fixture
async def storage(driver_config, fake_api):
    """Initialized TeldriveStorage backed by the fake server."""
    storage = TeldriveStorage(driver_config, transport=fake_api.transport)
    await storage.init()
    yield storage
    await storage.drop()


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path
