"""
DRACOON client.

Owns the REST transport and exposes the upload subsystem.

Usage:
    >>> async with DracoonClient("https://dracoon.example.com", token) as dracoon:
    ...     request = FileUploadRequest(parent_id=42, name="notes.txt")
    ...     node = await dracoon.uploads.upload_path(request, "notes.txt")
"""
from typing import Optional, Union

from .core.api import (
    AccessTokenProvider,
    APIConfig,
    AsyncAPIClient,
    StaticTokenProvider
)
from .core.logging import get_logger
from .core.upload import UploadConfig, UploadFacade

logger = get_logger('dracoonpy.client')


class DracoonClient:
    """
    Entry point for DRACOON uploads.
    
    Args:
        server_url: Base URL of the DRACOON server
        token: Access token or token provider (token acquisition is external)
        config: API configuration (server_url is filled in if empty)
        upload_config: Buffer sizes and progress interval
    """
    
    def __init__(
        self,
        server_url: str,
        token: Union[str, AccessTokenProvider],
        *,
        config: Optional[APIConfig] = None,
        upload_config: Optional[UploadConfig] = None
    ):
        self._config = config or APIConfig.default(server_url)
        if not self._config.server_url:
            self._config.server_url = server_url
        self._tokens = StaticTokenProvider(token) if isinstance(token, str) else token
        self._api = AsyncAPIClient(self._config)
        self._uploads = UploadFacade(self._api, self._tokens, upload_config)
    
    @property
    def config(self) -> APIConfig:
        return self._config
    
    @property
    def token_provider(self) -> AccessTokenProvider:
        return self._tokens
    
    @property
    def api(self) -> AsyncAPIClient:
        return self._api
    
    @property
    def closed(self) -> bool:
        return self._api.closed
    
    @property
    def uploads(self) -> UploadFacade:
        return self._uploads
    
    async def __aenter__(self) -> 'DracoonClient':
        await self._api.__aenter__()
        logger.debug(f"Connected to {self._config.base_url}")
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def close(self):
        """Close the client and release resources."""
        await self._api.close()
