"""
Protocol definitions for upload module.

Defines the narrow interfaces the upload subsystem consumes, so the REST
transport, token source and byte sources can be swapped or mocked.
"""
from typing import Any, AsyncIterable, Dict, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..api.async_client import ApiResponse
    from .models import Node


class ApiClientProtocol(Protocol):
    """Protocol for the REST transport used by upload services."""
    
    async def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> 'ApiResponse':
        """Send a JSON request and return the decoded response."""
        ...
    
    async def send_multipart(
        self,
        path: str,
        *,
        token: Optional[str] = None,
        field_name: str,
        file_name: str,
        content: AsyncIterable[bytes],
        content_type: str = 'application/octet-stream',
        headers: Optional[Dict[str, str]] = None
    ) -> 'ApiResponse':
        """Send a multipart request with one streamed file part."""
        ...


class ByteSourceProtocol(Protocol):
    """
    Protocol for buffered upload sources.
    
    `read` may be synchronous (io.BufferedReader, BytesIO) or a coroutine
    (aiofiles handles). An empty result signals end of source.
    """
    
    def read(self, size: int = -1) -> Any:
        ...


class UploadCallback(Protocol):
    """Observer of file upload lifecycle events."""
    
    def on_started(self, upload_id: str) -> None: ...
    def on_running(self, upload_id: str, bytes_sent: int, bytes_total: int) -> None: ...
    def on_finished(self, upload_id: str, node: 'Node') -> None: ...
    def on_canceled(self, upload_id: str) -> None: ...
    def on_failed(self, upload_id: str, error: Exception) -> None: ...


class FileUploadCallback:
    """Convenience base class; override only the events you need."""
    
    def on_started(self, upload_id: str) -> None:
        pass
    
    def on_running(self, upload_id: str, bytes_sent: int, bytes_total: int) -> None:
        pass
    
    def on_finished(self, upload_id: str, node: 'Node') -> None:
        pass
    
    def on_canceled(self, upload_id: str) -> None:
        pass
    
    def on_failed(self, upload_id: str, error: Exception) -> None:
        pass


class LoggerProtocol(Protocol):
    """Protocol for logger objects."""
    
    def debug(self, msg: str) -> None: ...
    def info(self, msg: str) -> None: ...
    def warning(self, msg: str) -> None: ...
    def error(self, msg: str) -> None: ...
