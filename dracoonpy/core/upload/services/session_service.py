"""
Upload session service.

Owns the create / complete phases of the upload protocol and the upload ID
handed out by the server.
"""
from typing import Optional

from ..models import FileUploadRequest, Node, ResolutionStrategy
from ..protocols import ApiClientProtocol
from ...api.auth import AccessTokenProvider
from ...api.errors import ApiErrorCode, DracoonErrorParser
from ...exceptions import UploadApiError, UploadPhase
from ...logging import get_logger

UPLOADS_PATH = 'nodes/files/uploads'


def upload_channel_path(upload_id: str) -> str:
    """Path chunks are posted to and the upload is completed at."""
    return f"{UPLOADS_PATH}/{upload_id}"


class UploadSession:
    """
    Three-phase upload session.
    
    Responsibilities:
    - Create the upload channel and keep its ID
    - Build the chunk upload path
    - Complete the upload and map the created node
    
    The ID is assigned once by `open` and never changes. Every request asks
    the token provider for a fresh access token.
    """
    
    def __init__(
        self,
        api_client: ApiClientProtocol,
        token_provider: AccessTokenProvider,
        request: FileUploadRequest
    ):
        """
        Initialize upload session.
        
        Args:
            api_client: REST transport
            token_provider: Source of access tokens
            request: Description of the file to create
        """
        self._api = api_client
        self._tokens = token_provider
        self._request = request
        self._upload_id: Optional[str] = None
        self._completed = False
        self._logger = get_logger('dracoonpy.upload.session')
    
    @property
    def upload_id(self) -> Optional[str]:
        """Upload ID assigned by the server (None before `open`)."""
        return self._upload_id
    
    @property
    def request(self) -> FileUploadRequest:
        return self._request
    
    @property
    def file_name(self) -> str:
        return self._request.name
    
    @property
    def is_open(self) -> bool:
        return self._upload_id is not None and not self._completed
    
    @property
    def chunk_path(self) -> str:
        """Path chunks of this session are posted to."""
        if self._upload_id is None:
            raise RuntimeError("Upload session is not open")
        return upload_channel_path(self._upload_id)
    
    async def open(self) -> str:
        """
        Create the upload on the server.
        
        Returns:
            Upload ID
            
        Raises:
            UploadApiError: If the server rejects the request (phase CREATE)
            TransportError: If the server cannot be reached
        """
        if self._upload_id is not None:
            raise RuntimeError(f"Upload session already open: {self._upload_id}")
        
        token = await self._tokens.get_access_token()
        response = await self._api.request(
            'POST',
            UPLOADS_PATH,
            token=token,
            json=self._request.to_create_dict()
        )
        
        if not response.is_successful:
            code = DracoonErrorParser.parse_create_upload_error(response)
            self._logger.debug(
                f"Creation of file upload '{self._request.name}' failed with '{code.name}'!"
            )
            raise UploadApiError(UploadPhase.CREATE, code, response.status)
        
        body = response.body if isinstance(response.body, dict) else {}
        upload_id = body.get('uploadId')
        if not upload_id:
            self._logger.error(f"Create response without upload ID: {response.body!r}")
            raise UploadApiError(
                UploadPhase.CREATE, ApiErrorCode.SERVER_UNKNOWN_ERROR, response.status
            )
        
        self._upload_id = str(upload_id)
        self._logger.debug(f"Upload created for '{self._request.name}': {self._upload_id}")
        return self._upload_id
    
    async def complete(
        self,
        resolution_strategy: Optional[ResolutionStrategy] = None
    ) -> Node:
        """
        Finalize the upload.
        
        Args:
            resolution_strategy: Overrides the request's strategy
            
        Returns:
            The created node
            
        Raises:
            UploadApiError: If the server rejects the request (phase COMPLETE)
            TransportError: If the server cannot be reached
        """
        if self._upload_id is None:
            raise RuntimeError("Upload session is not open")
        if self._completed:
            raise RuntimeError(f"Upload session already completed: {self._upload_id}")
        
        strategy = resolution_strategy or self._request.resolution_strategy
        payload = {'fileName': self._request.name}
        if strategy is not None:
            payload['resolutionStrategy'] = strategy.value
        
        token = await self._tokens.get_access_token()
        response = await self._api.request(
            'PUT',
            self.chunk_path,
            token=token,
            json=payload
        )
        
        if not response.is_successful:
            code = DracoonErrorParser.parse_complete_upload_error(response)
            self._logger.debug(
                f"Completion of file upload '{self._request.name}' failed with '{code.name}'!"
            )
            raise UploadApiError(UploadPhase.COMPLETE, code, response.status)
        
        try:
            node = Node.from_api(response.body)
        except ValueError:
            self._logger.error(f"Complete response without node: {response.body!r}")
            raise UploadApiError(
                UploadPhase.COMPLETE, ApiErrorCode.SERVER_UNKNOWN_ERROR, response.status
            )
        
        self._completed = True
        self._logger.debug(f"Upload {self._upload_id} completed: node {node.id}")
        return node
