"""
Chunk upload service.

Handles transmitting individual chunks of an upload session.
"""
from typing import AsyncIterator, Callable, Optional
import time

from ..models import Chunk
from ..protocols import ApiClientProtocol
from ...api.auth import AccessTokenProvider
from ...api.errors import DracoonErrorParser
from ...exceptions import UploadApiError, UploadPhase
from ...logging import get_logger
from .session_service import upload_channel_path

ProgressFunc = Callable[[int], None]


class ChunkTransmitter:
    """
    Sends chunks as multipart requests.
    
    Responsibilities:
    - Build the Content-Range header from the chunk offset
    - Stream the chunk body in small blocks, reporting progress per block
    - Map error responses to UploadApiError (phase UPLOAD_CHUNK)
    
    One chunk at a time: the server cannot acknowledge out-of-order ranges.
    """
    
    DEFAULT_BLOCK_SIZE = 2 * 1024
    FIELD_NAME = 'file'
    CONTENT_TYPE = 'application/octet-stream'
    
    def __init__(
        self,
        api_client: ApiClientProtocol,
        token_provider: AccessTokenProvider,
        block_size: int = DEFAULT_BLOCK_SIZE
    ):
        """
        Initialize chunk transmitter.
        
        Args:
            api_client: REST transport
            token_provider: Source of access tokens
            block_size: Size of the blocks the chunk body is streamed in
        """
        if block_size <= 0:
            raise ValueError("Block size must be positive")
        self._api = api_client
        self._tokens = token_provider
        self._block_size = block_size
        self._logger = get_logger('dracoonpy.upload.chunk')
    
    @property
    def block_size(self) -> int:
        return self._block_size
    
    async def iter_blocks(
        self,
        chunk: Chunk,
        on_progress: Optional[ProgressFunc] = None
    ) -> AsyncIterator[bytes]:
        """
        Yield the chunk data block by block.
        
        `on_progress` receives the number of chunk bytes handed to the
        transport so far, after each block.
        """
        view = memoryview(chunk.data)
        sent = 0
        while sent < chunk.length:
            count = min(self._block_size, chunk.length - sent)
            yield bytes(view[sent:sent + count])
            sent += count
            if on_progress is not None:
                on_progress(sent)
    
    async def send(
        self,
        upload_id: str,
        file_name: str,
        chunk: Chunk,
        on_progress: Optional[ProgressFunc] = None
    ) -> None:
        """
        Upload a single chunk.
        
        Args:
            upload_id: Upload ID of the session
            file_name: Name of the target file
            chunk: Chunk to send
            on_progress: Optional per-block progress callback
            
        Raises:
            UploadApiError: If the server rejects the chunk
            TransportError: If the server cannot be reached
        """
        if chunk.length == 0:
            self._logger.debug(f"Skipping empty chunk at offset {chunk.offset}")
            return
        
        chunk_size_kb = chunk.length / 1024
        self._logger.debug(f"Uploading chunk {chunk.content_range} ({chunk_size_kb:.1f} KB)")
        upload_start = time.time()
        
        token = await self._tokens.get_access_token()
        response = await self._api.send_multipart(
            upload_channel_path(upload_id),
            token=token,
            field_name=self.FIELD_NAME,
            file_name=file_name,
            content=self.iter_blocks(chunk, on_progress),
            content_type=self.CONTENT_TYPE,
            headers={'Content-Range': chunk.content_range}
        )
        
        if not response.is_successful:
            code = DracoonErrorParser.parse_upload_error(response)
            self._logger.debug(
                f"Upload of chunk {chunk.content_range} of '{file_name}' failed with '{code.name}'!"
            )
            raise UploadApiError(UploadPhase.UPLOAD_CHUNK, code, response.status)
        
        upload_time = time.time() - upload_start
        speed_kbps = (chunk_size_kb / upload_time) if upload_time > 0 else 0
        self._logger.debug(
            f"Chunk {chunk.content_range} uploaded in {upload_time:.2f}s ({speed_kbps:.1f} KB/s)"
        )
