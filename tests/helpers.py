"""Fakes and recorders shared by the test suite."""
import asyncio
from typing import Any, List, Optional

from dracoonpy.core.api.async_client import ApiResponse
from dracoonpy.core.upload.protocols import FileUploadCallback


NODE_PAYLOAD = {
    'id': 4711,
    'name': 'report.pdf',
    'type': 'file',
    'parentId': 42,
    'size': 0,
    'classification': 2,
    'createdAt': '2024-01-01T00:00:00Z',
}


class FakeApiClient:
    """
    In-memory stand-in for AsyncAPIClient.
    
    Records every call, drains streamed chunk bodies and answers with
    configurable responses. A response may also be an exception to raise.
    """
    
    def __init__(self, upload_id: str = 'upload-1', node: Optional[dict] = None):
        self.calls: List[tuple] = []
        self.chunks: List[tuple] = []
        self.tokens: List[Optional[str]] = []
        self.create_response: Any = ApiResponse(201, {'uploadId': upload_id})
        self.complete_response: Any = ApiResponse(201, node or dict(NODE_PAYLOAD))
        self.chunk_responses: List[Any] = []
        self.on_chunk = None
        self.chunk_gate: Optional[asyncio.Event] = None
        self.chunk_in_flight = asyncio.Event()
        self.last_create_body = None
        self.last_complete_body = None
    
    @property
    def phases(self) -> List[str]:
        return [call[0] for call in self.calls]
    
    @property
    def content_ranges(self) -> List[str]:
        return [content_range for content_range, _ in self.chunks]
    
    @property
    def uploaded_data(self) -> bytes:
        return b''.join(data for _, data in self.chunks)
    
    async def request(self, method, path, *, token=None, json=None, headers=None):
        self.tokens.append(token)
        if method == 'POST':
            self.calls.append(('create', path))
            self.last_create_body = json
            response = self.create_response
        else:
            self.calls.append(('complete', path))
            self.last_complete_body = json
            response = self.complete_response
        if isinstance(response, BaseException):
            raise response
        return response
    
    async def send_multipart(self, path, *, token=None, field_name, file_name, content,
                             content_type='application/octet-stream', headers=None):
        self.tokens.append(token)
        index = len(self.chunks)
        data = b''.join([block async for block in content])
        content_range = headers['Content-Range']
        self.chunks.append((content_range, data))
        self.calls.append(('chunk', path, content_range, field_name, file_name, content_type))
        
        self.chunk_in_flight.set()
        if self.chunk_gate is not None:
            await self.chunk_gate.wait()
        if self.on_chunk is not None:
            self.on_chunk(index)
        
        response = self.chunk_responses.pop(0) if self.chunk_responses else ApiResponse(201)
        if isinstance(response, BaseException):
            raise response
        return response


class CountingTokenProvider:
    """Hands out a new token for every request."""
    
    def __init__(self):
        self.count = 0
    
    async def get_access_token(self) -> str:
        self.count += 1
        return f"token-{self.count}"


class BrokenTokenProvider:
    """Token provider whose refresh always fails."""
    
    async def get_access_token(self) -> str:
        raise RuntimeError("token refresh failed")


class RecordingCallback(FileUploadCallback):
    """Collects upload events as tuples."""
    
    def __init__(self, clock=None):
        self.events: List[tuple] = []
        self._clock = clock
    
    @property
    def names(self) -> List[str]:
        return [event[0] for event in self.events]
    
    @property
    def running(self) -> List[tuple]:
        return [event for event in self.events if event[0] == 'running']
    
    def on_started(self, upload_id):
        self.events.append(('started', upload_id))
    
    def on_running(self, upload_id, bytes_sent, bytes_total):
        now = self._clock.last if self._clock is not None else None
        self.events.append(('running', upload_id, bytes_sent, bytes_total, now))
    
    def on_finished(self, upload_id, node):
        self.events.append(('finished', upload_id, node))
    
    def on_canceled(self, upload_id):
        self.events.append(('canceled', upload_id))
    
    def on_failed(self, upload_id, error):
        self.events.append(('failed', upload_id, error))


class StepClock:
    """Fake wall clock advancing by `step` seconds on every call."""
    
    def __init__(self, step: float = 0.01, start: float = 1000.0):
        self.step = step
        self.now = start
        self.last = start
    
    def __call__(self) -> float:
        self.last = self.now
        self.now += self.step
        return self.last


class AsyncBytesSource:
    """Byte source with an awaitable read, like an aiofiles handle."""
    
    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0
    
    async def read(self, size: int = -1) -> bytes:
        if size < 0:
            size = len(self._data) - self._pos
        block = self._data[self._pos:self._pos + size]
        self._pos += len(block)
        return block


class FailingSource:
    """Byte source failing after `fail_after` successful reads."""
    
    def __init__(self, data: bytes, fail_after: int = 0, on_fail=None):
        self._data = data
        self._reads = 0
        self._fail_after = fail_after
        self.on_fail = on_fail
    
    def read(self, size: int = -1) -> bytes:
        if self._reads >= self._fail_after:
            if self.on_fail is not None:
                self.on_fail()
            raise OSError("disk read error")
        self._reads += 1
        return self._data
