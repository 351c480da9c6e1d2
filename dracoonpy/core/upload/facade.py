"""
Upload facade.

Provides a simplified interface for file and stream uploads and keeps track
of running background uploads so they can be canceled by ID.
"""
import uuid
from pathlib import Path
from typing import Dict, Optional, Union

from .coordinator import FileUpload
from .models import FileUploadRequest, Node, UploadConfig
from .protocols import ApiClientProtocol, ByteSourceProtocol, UploadCallback
from .services import AsyncFileReader, FileValidator
from .stream import StreamUpload
from ..api.auth import AccessTokenProvider
from ..logging import get_logger


class UploadFacade:
    """
    Main entry point for uploads.
    
    Example:
        >>> uploads = UploadFacade(api_client, StaticTokenProvider(token))
        >>> request = FileUploadRequest(parent_id=42, name="report.pdf")
        >>> node = await uploads.upload_path(request, "report.pdf")
        >>> print(node.id)
    """
    
    def __init__(
        self,
        api_client: ApiClientProtocol,
        token_provider: AccessTokenProvider,
        config: Optional[UploadConfig] = None
    ):
        """
        Initialize upload facade.
        
        Args:
            api_client: REST transport
            token_provider: Source of access tokens
            config: Buffer sizes and progress interval
        """
        self._api = api_client
        self._tokens = token_provider
        self._config = config or UploadConfig()
        self._validator = FileValidator()
        self._reader = AsyncFileReader()
        self._uploads: Dict[str, FileUpload] = {}
        self._logger = get_logger('dracoonpy.upload')
    
    @property
    def config(self) -> UploadConfig:
        return self._config
    
    def create_file_upload(
        self,
        request: FileUploadRequest,
        source: ByteSourceProtocol,
        length: int,
        upload_id: Optional[str] = None,
        callback: Optional[UploadCallback] = None
    ) -> FileUpload:
        """Build a FileUpload without starting it."""
        upload = FileUpload(
            self._api,
            self._tokens,
            upload_id or uuid.uuid4().hex,
            request,
            source,
            length,
            config=self._config
        )
        upload.add_callback(callback)
        return upload
    
    async def upload(
        self,
        request: FileUploadRequest,
        source: ByteSourceProtocol,
        length: int,
        upload_id: Optional[str] = None,
        callback: Optional[UploadCallback] = None
    ) -> Optional[Node]:
        """
        Upload on the calling task.
        
        Returns:
            Created node, or None if the upload was canceled
            
        Raises:
            DracoonException: If the upload failed
        """
        upload = self.create_file_upload(request, source, length, upload_id, callback)
        self._register(upload)
        try:
            return await upload.run()
        finally:
            self._uploads.pop(upload.id, None)
    
    def start_upload(
        self,
        request: FileUploadRequest,
        source: ByteSourceProtocol,
        length: int,
        upload_id: Optional[str] = None,
        callback: Optional[UploadCallback] = None
    ) -> FileUpload:
        """
        Start a background upload.
        
        The upload stays registered (see `get_upload`, `cancel_upload`)
        until its task is done.
        """
        upload = self.create_file_upload(request, source, length, upload_id, callback)
        self._register(upload)
        try:
            task = upload.start()
        except Exception:
            self._uploads.pop(upload.id, None)
            raise
        task.add_done_callback(lambda _: self._uploads.pop(upload.id, None))
        return upload
    
    async def upload_path(
        self,
        request: FileUploadRequest,
        file_path: Union[str, Path],
        upload_id: Optional[str] = None,
        callback: Optional[UploadCallback] = None
    ) -> Optional[Node]:
        """
        Upload a local file on the calling task.
        
        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
            DracoonException: If the upload failed
        """
        path, size = self._validator.validate(file_path)
        self._logger.debug(f"Uploading local file {path} ({size} bytes)")
        async with self._reader.open(path) as source:
            return await self.upload(request, source, size, upload_id, callback)
    
    def get_upload(self, upload_id: str) -> Optional[FileUpload]:
        return self._uploads.get(upload_id)
    
    def cancel_upload(self, upload_id: str) -> bool:
        """
        Cancel a running upload.
        
        Returns:
            False if no upload with this ID is running
        """
        upload = self._uploads.get(upload_id)
        if upload is None:
            return False
        upload.cancel()
        return True
    
    async def create_upload_stream(
        self,
        request: FileUploadRequest
    ) -> StreamUpload:
        """Open a streaming upload."""
        return await StreamUpload.create(self._api, self._tokens, request, self._config)
    
    def _register(self, upload: FileUpload) -> None:
        if upload.id in self._uploads:
            raise ValueError(f"Upload ID already in use: {upload.id}")
        self._uploads[upload.id] = upload
    
    def running_uploads(self) -> Dict[str, int]:
        """Snapshot of running uploads: ID -> bytes sent."""
        return {uid: upload.bytes_sent for uid, upload in self._uploads.items()}
