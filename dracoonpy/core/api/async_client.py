"""
Async DRACOON REST client.

Thin aiohttp transport used by the upload subsystem. It knows nothing about
upload phases; it sends requests, decodes responses and translates network
failures into TransportError / InsecureTransportError.
"""
import json
import logging
import ssl
import asyncio
from dataclasses import dataclass, field
from typing import Any, AsyncIterable, Dict, Optional
import aiohttp

from .config import APIConfig
from ..exceptions import InsecureTransportError, TransportError
from ..logging import get_logger

AUTH_HEADER = 'X-Sds-Auth-Token'


@dataclass(frozen=True)
class ApiResponse:
    """
    Decoded HTTP response.
    
    Attributes:
        status: HTTP status code
        body: Decoded JSON body, raw text for non-JSON bodies, None if empty
        headers: Response headers
    """
    status: int
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    
    @property
    def is_successful(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status < 300
    
    @classmethod
    async def from_aiohttp(cls, response: aiohttp.ClientResponse) -> 'ApiResponse':
        """Read and decode an aiohttp response."""
        raw = await response.read()
        body: Any = None
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                body = raw.decode('utf-8', errors='replace')
        return cls(status=response.status, body=body, headers=dict(response.headers))


class AsyncAPIClient:
    """
    Asynchronous DRACOON API client.
    
    Example:
        >>> config = APIConfig.default('https://dracoon.example.com')
        >>> async with AsyncAPIClient(config) as client:
        ...     response = await client.request('GET', 'user/account', token=token)
    """
    
    def __init__(self, config: Optional[APIConfig] = None):
        """
        Initialize async API client.
        
        Args:
            config: API configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._closed = False
        self._logger = get_logger('dracoonpy.api')
        if not logging.getLogger().handlers:
            self._logger.setLevel(self._config.log_level)
    
    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    async def __aenter__(self) -> 'AsyncAPIClient':
        await self._ensure_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._closed:
            raise TransportError("Client is closed")
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
        return self._session
    
    async def close(self):
        """Close client and release resources."""
        self._closed = True
        
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
        
        if self._connector and not self._connector.closed:
            await self._connector.close()
            self._connector = None
    
    def _build_url(self, path: str) -> str:
        return f"{self._config.base_url}{path.lstrip('/')}"
    
    def _build_headers(
        self,
        token: Optional[str],
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        result = dict(headers or {})
        if token:
            result[AUTH_HEADER] = token
        return result
    
    async def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        """
        Send a JSON request.
        
        Args:
            method: HTTP method
            path: Path relative to the API base URL
            token: Access token sent in the auth header
            json: Optional JSON body
            headers: Additional request headers
            
        Returns:
            Decoded response (also for non-2xx statuses)
            
        Raises:
            InsecureTransportError: If the TLS handshake fails
            TransportError: If the server cannot be reached
        """
        return await self._execute(
            method,
            path,
            json=json,
            headers=self._build_headers(token, headers)
        )
    
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
    ) -> ApiResponse:
        """
        Send a multipart/form-data POST with a single streamed file part.
        
        Args:
            path: Path relative to the API base URL
            token: Access token sent in the auth header
            field_name: Form field name of the part
            file_name: File name of the part
            content: Async iterable yielding the part's bytes block by block
            content_type: Content type of the part
            headers: Additional request headers
        """
        writer = aiohttp.MultipartWriter('form-data')
        part = writer.append(content, {'Content-Type': content_type})
        part.set_content_disposition('form-data', name=field_name, filename=file_name)
        
        return await self._execute(
            'POST',
            path,
            data=writer,
            headers=self._build_headers(token, headers)
        )
    
    async def _execute(self, method: str, path: str, **kwargs) -> ApiResponse:
        session = await self._ensure_session()
        url = self._build_url(path)
        request_kwargs = self._config.get_request_kwargs()
        
        self._logger.debug(f"{method} {url}")
        
        try:
            async with session.request(method, url, **request_kwargs, **kwargs) as response:
                result = await ApiResponse.from_aiohttp(response)
        except (aiohttp.ClientSSLError, ssl.SSLError) as e:
            self._logger.error(f"Server SSL handshake failed: {e}")
            raise InsecureTransportError("Server SSL handshake failed!", e) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self._logger.debug(f"Server communication failed: {e!r}")
            raise TransportError("Server communication failed!", e) from e
        
        self._logger.debug(f"{method} {url} -> {result.status}")
        return result
