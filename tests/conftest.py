"""Pytest fixtures for kekupload tests."""
import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from kekupload.core.api.errors import APIError
from kekupload.core.api.responses import StreamCreated, ChunkAccepted, StreamFinished, StreamRemoved
from kekupload.core.crypto import sha1_hex
from kekupload.core.exceptions import TransportError
from kekupload.core.upload import ChunkedUploader, FileUploader, UploadConfig, UploadQueue


class FakeTransport:
    """In-memory stand-in for KekUploadAPI that records every call."""
    
    def __init__(self):
        self.calls = []
        self.chunks = {}
        self.objects = {}
        self.chunk_failures = 0
        self.chunk_rejections = 0
        self.fail_create_for = set()
        self.fail_finish = 0
        self.fail_remove = False
        self.refuse_remove = False
        self.on_chunk = None
        self._counter = 0
    
    def ops(self, name):
        return [call for call in self.calls if call[0] == name]
    
    async def create_stream(self, extension):
        self.calls.append(('create', extension))
        if extension in self.fail_create_for:
            raise APIError(400, {'generic': 'PARAM_LENGTH', 'field': 'EXTENSION', 'error': 'bad extension'})
        stream_id = f"stream{self._counter}"
        self._counter += 1
        self.chunks[stream_id] = []
        return StreamCreated(stream_id=stream_id)
    
    async def upload_chunk(self, stream_id, content_hash, chunk):
        self.calls.append(('upload', stream_id, content_hash, len(chunk)))
        if self.on_chunk is not None:
            await self.on_chunk(stream_id, chunk)
        if self.chunk_failures > 0:
            self.chunk_failures -= 1
            raise TransportError("connection reset")
        if self.chunk_rejections > 0:
            self.chunk_rejections -= 1
            return ChunkAccepted(success=False)
        if content_hash != sha1_hex(chunk):
            raise APIError(400, {'error': 'HASH_MISMATCH'})
        self.chunks[stream_id].append(bytes(chunk))
        return ChunkAccepted(success=True)
    
    async def finish_stream(self, stream_id, file_hash):
        self.calls.append(('finish', stream_id, file_hash))
        if self.fail_finish > 0:
            self.fail_finish -= 1
            raise APIError(500, {'error': 'internal'})
        data = b''.join(self.chunks[stream_id])
        if sha1_hex(data) != file_hash:
            raise APIError(400, {'error': 'HASH_MISMATCH'})
        object_id = f"obj-{stream_id}"
        self.objects[object_id] = data
        return StreamFinished(object_id=object_id)
    
    async def remove_stream(self, stream_id):
        self.calls.append(('remove', stream_id))
        if self.fail_remove:
            raise TransportError("connection reset")
        if self.refuse_remove:
            return StreamRemoved(success=False)
        self.chunks.pop(stream_id, None)
        return StreamRemoved(success=True)


class ChunkGate:
    """Blocks the n-th chunk upload attempt until released."""
    
    def __init__(self, transport, attempt):
        self._transport = transport
        self._attempt = attempt
        self.entered = asyncio.Event()
        self.released = asyncio.Event()
        transport.on_chunk = self
    
    async def __call__(self, stream_id, chunk):
        if len(self._transport.ops('upload')) == self._attempt:
            self.entered.set()
            await self.released.wait()


@pytest.fixture
def transport():
    """Returns a fresh in-memory transport."""
    return FakeTransport()


@pytest.fixture
def make_gate(transport):
    """Factory for gates on the shared transport."""
    return lambda attempt: ChunkGate(transport, attempt)


@pytest.fixture
def engine(transport):
    return ChunkedUploader(transport)


@pytest.fixture
def small_config():
    """Four-byte chunks read eight bytes at a time."""
    return UploadConfig(read_size=8, chunk_size=4)


@pytest.fixture
def segmenter(engine, small_config):
    return FileUploader(engine, small_config)


@pytest.fixture
def queue(segmenter):
    return UploadQueue(segmenter)


class FakeKekServer:
    """aiohttp application speaking the KekUpload stream protocol."""
    
    def __init__(self):
        self.streams = {}
        self.objects = {}
        self.requests = []
        self.fail_uploads = 0
        self.gateway_errors = 0
        self.base = None
        self._counter = 0
    
    @staticmethod
    def _error(status, generic, field, error):
        return web.json_response({'generic': generic, 'field': field, 'error': error}, status=status)
    
    async def create(self, request):
        ext = request.match_info['ext']
        self.requests.append(('create', ext))
        if ext == 'badjson':
            return web.Response(text='not json')
        stream = f"s{self._counter}"
        self._counter += 1
        self.streams[stream] = []
        return web.json_response({'stream': stream})
    
    async def upload(self, request):
        stream = request.match_info['stream']
        content_hash = request.match_info['hash']
        body = await request.read()
        self.requests.append(('upload', stream, content_hash))
        if self.fail_uploads > 0:
            self.fail_uploads -= 1
            return self._error(500, 'INTERNAL', 'SERVER', 'try again')
        if self.gateway_errors > 0:
            self.gateway_errors -= 1
            return web.Response(status=502, body=b"\xff\xfe\xfa bad gateway")
        if stream not in self.streams:
            return self._error(404, 'NOT_FOUND', 'STREAM', 'Stream not found')
        if sha1_hex(body) != content_hash:
            return self._error(400, 'HASH_MISMATCH', 'HASH', 'Hash does not match')
        self.streams[stream].append(body)
        return web.json_response({'success': True})
    
    async def finish(self, request):
        stream = request.match_info['stream']
        file_hash = request.match_info['hash']
        self.requests.append(('finish', stream, file_hash))
        if stream not in self.streams:
            return self._error(404, 'NOT_FOUND', 'STREAM', 'Stream not found')
        data = b''.join(self.streams.pop(stream))
        if sha1_hex(data) != file_hash:
            return self._error(400, 'HASH_MISMATCH', 'HASH', 'Hash does not match')
        object_id = f"id{len(self.objects)}"
        self.objects[object_id] = data
        return web.json_response({'id': object_id})
    
    async def remove(self, request):
        stream = request.match_info['stream']
        self.requests.append(('remove', stream))
        if self.streams.pop(stream, None) is None:
            return self._error(404, 'NOT_FOUND', 'STREAM', 'Stream not found')
        return web.json_response({'success': True})
    
    def make_app(self):
        app = web.Application()
        app.router.add_post('/c/{ext}', self.create)
        app.router.add_post('/u/{stream}/{hash}', self.upload)
        app.router.add_post('/f/{stream}/{hash}', self.finish)
        app.router.add_post('/r/{stream}', self.remove)
        return app


@pytest_asyncio.fixture
async def kek_server():
    """Runs a FakeKekServer on a local port."""
    state = FakeKekServer()
    server = TestServer(state.make_app())
    await server.start_server()
    state.base = str(server.make_url('/'))
    yield state
    await server.close()
