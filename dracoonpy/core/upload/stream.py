"""
Streaming upload.

A push-style writer: callers write bytes over time, every full chunk buffer
is transmitted immediately and `close` flushes the rest and completes the
upload. Everything runs on the caller's task.
"""
from typing import Optional

from .models import Chunk, FileUploadRequest, Node, UploadConfig
from .protocols import ApiClientProtocol
from .services import ChunkTransmitter, UploadSession
from ..api.auth import AccessTokenProvider
from ..exceptions import (
    BoundsError,
    DracoonException,
    StreamClosedError,
    UploadStreamError
)
from ..logging import get_logger


class StreamUpload:
    """
    Writer uploading its content in fixed-size chunks.
    
    There is no cancellation: abandoning an unclosed stream leaves the
    upload unfinished on the server.
    
    Example:
        >>> stream = await StreamUpload.create(api, tokens, request)
        >>> await stream.write(b"hello ")
        >>> await stream.write(b"world")
        >>> node = await stream.close()
    
    Or as async context manager (closed on normal exit only):
        >>> async with StreamUpload(api, tokens, request) as stream:
        ...     await stream.write(data)
        >>> node = stream.node
    """
    
    def __init__(
        self,
        api_client: ApiClientProtocol,
        token_provider: AccessTokenProvider,
        request: FileUploadRequest,
        config: Optional[UploadConfig] = None
    ):
        """
        Initialize stream upload. Call `open` (or use `create`) before writing.
        
        Args:
            api_client: REST transport
            token_provider: Source of access tokens
            request: Description of the file to create
            config: Chunk size configuration
        """
        config = config or UploadConfig()
        self._session = UploadSession(api_client, token_provider, request)
        self._transmitter = ChunkTransmitter(api_client, token_provider, config.block_size)
        self._chunk_size = config.stream_chunk_size
        
        self._chunk: Optional[bytearray] = bytearray(self._chunk_size)
        self._chunk_index = 0
        self._chunk_offset = 0
        self._closed = False
        self._error: Optional[DracoonException] = None
        self._node: Optional[Node] = None
        self._logger = get_logger('dracoonpy.upload.stream')
    
    @classmethod
    async def create(
        cls,
        api_client: ApiClientProtocol,
        token_provider: AccessTokenProvider,
        request: FileUploadRequest,
        config: Optional[UploadConfig] = None
    ) -> 'StreamUpload':
        """Create a stream and open its upload on the server."""
        stream = cls(api_client, token_provider, request, config)
        await stream.open()
        return stream
    
    @property
    def upload_id(self) -> Optional[str]:
        return self._session.upload_id
    
    @property
    def chunk_size(self) -> int:
        return self._chunk_size
    
    @property
    def chunk_index(self) -> int:
        """Number of full chunks transmitted so far."""
        return self._chunk_index
    
    @property
    def chunk_offset(self) -> int:
        """Bytes waiting in the chunk buffer."""
        return self._chunk_offset
    
    @property
    def bytes_written(self) -> int:
        return self._chunk_index * self._chunk_size + self._chunk_offset
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    @property
    def node(self) -> Optional[Node]:
        """Created node (available after `close`)."""
        return self._node
    
    async def __aenter__(self) -> 'StreamUpload':
        if self._session.upload_id is None:
            await self.open()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None and not self._closed:
            await self.close()
    
    async def open(self) -> str:
        """
        Create the upload on the server.
        
        Raises:
            UploadStreamError: If the upload cannot be created
        """
        try:
            upload_id = await self._session.open()
        except DracoonException as e:
            raise UploadStreamError("Could not create upload stream.", e) from e
        self._logger.debug(f"Upload stream opened for '{self._session.file_name}': {upload_id}")
        return upload_id
    
    async def write_byte(self, value: int) -> None:
        """Write a single byte (0-255)."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        await self.write(bytes((value,)))
    
    async def write(self, data, offset: int = 0, length: Optional[int] = None) -> None:
        """
        Write `length` bytes of `data` starting at `offset`.
        
        Args:
            data: Bytes-like object
            offset: Start offset in `data`
            length: Number of bytes (default: everything after `offset`)
            
        Raises:
            StreamClosedError: If the stream is closed
            BoundsError: If offset/length lie outside `data`
            UploadStreamError: If transmitting a full chunk failed
        """
        self._assert_writable()
        
        view = memoryview(data).cast('B')
        if length is None:
            length = len(view) - offset
        
        if offset < 0 or length < 0 or offset + length > len(view):
            raise BoundsError(
                f"Invalid range: offset={offset}, length={length}, size={len(view)}"
            )
        
        if length == 0:
            return
        
        read = 0
        while read < length:
            count = min(length - read, self._chunk_size - self._chunk_offset)
            start = offset + read
            
            self._logger.debug(
                f"Loading: {self._chunk_index}: {self._chunk_offset}-{self._chunk_offset + count} "
                f"({self.bytes_written}-{self.bytes_written + count})"
            )
            self._chunk[self._chunk_offset:self._chunk_offset + count] = view[start:start + count]
            self._chunk_offset += count
            
            if self._chunk_offset == self._chunk_size:
                await self._flush_chunk()
                self._chunk_index += 1
                self._chunk_offset = 0
            
            read += count
    
    async def close(self) -> Node:
        """
        Flush pending bytes and complete the upload.
        
        Not idempotent: closing twice raises StreamClosedError.
        
        Returns:
            The created node
            
        Raises:
            StreamClosedError: If the stream is already closed
            UploadStreamError: If flushing or completing failed
        """
        self._assert_writable()
        
        await self._flush_chunk()
        
        try:
            node = await self._session.complete()
        except DracoonException as e:
            self._error = e
            raise UploadStreamError("Could not close upload stream.", e) from e
        
        self._chunk = None
        self._closed = True
        self._node = node
        self._logger.info(
            f"Upload stream for '{self._session.file_name}' closed after "
            f"{self.bytes_written} bytes: node {node.id}"
        )
        return node
    
    def _assert_writable(self) -> None:
        if self._closed:
            raise StreamClosedError("Stream was already closed.")
        if self._error is not None:
            raise UploadStreamError("Upload stream failed earlier.", self._error)
        if self._session.upload_id is None:
            raise UploadStreamError("Upload stream was not opened.")
    
    async def _flush_chunk(self) -> None:
        if self._chunk_offset <= 0:
            return
        
        chunk = Chunk(
            self._chunk_index * self._chunk_size,
            bytes(self._chunk[:self._chunk_offset])
        )
        try:
            await self._transmitter.send(
                self._session.upload_id, self._session.file_name, chunk
            )
        except DracoonException as e:
            self._error = e
            raise UploadStreamError("Could not write to upload stream.", e) from e
