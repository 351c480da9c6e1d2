"""
Transport configuration for the DRACOON REST API.

Every setting ends up as keyword arguments for aiohttp: the connector
(TLS, pool size), the session (headers, timeouts) or a request (proxy).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
import logging
import ssl

import aiohttp


@dataclass
class SSLConfig:
    """
    TLS settings.
    
    On-premises DRACOON servers are often signed by a company CA; point
    `ca_file` at it instead of disabling verification.
    """
    verify: bool = True
    ca_file: Optional[str] = None
    
    def to_aiohttp_ssl(self) -> Union[bool, ssl.SSLContext]:
        """Value for the connector's `ssl` argument (False skips verification)."""
        if not self.verify:
            return False
        return ssl.create_default_context(cafile=self.ca_file)


@dataclass
class TimeoutConfig:
    """
    Timeouts in seconds.
    
    A chunk request streams up to `UploadConfig.read_size` bytes, so there is
    no overall limit per request by default, only for connecting and for
    waiting on the server between reads.
    """
    connect: float = 30.0
    read: float = 60.0
    total: Optional[float] = None
    
    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            sock_connect=self.connect,
            sock_read=self.read
        )


@dataclass
class APIConfig:
    """
    Connection settings for one DRACOON server.
    
    Attributes:
        server_url: Server base URL, e.g. https://dracoon.example.com
        api_path: Path of the REST API below the server URL
        user_agent: Sent with every request
        proxy_url: HTTP(S) proxy; credentials may be embedded in the URL
        ssl: TLS settings
        timeout: Connect/read timeouts
        extra_headers: Added to every request
        log_level: Level of the transport logger (unless logging is configured)
        max_connections: Connection pool size
    """
    server_url: str = ''
    api_path: str = '/api/v4'
    user_agent: str = 'dracoonpy/1.0.0'
    proxy_url: Optional[str] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    log_level: int = logging.INFO
    max_connections: int = 10
    
    def __post_init__(self):
        if self.max_connections <= 0:
            raise ValueError("max_connections must be positive")
    
    @property
    def base_url(self) -> str:
        """Base URL of the REST API, always ending with a slash."""
        return f"{self.server_url.rstrip('/')}/{self.api_path.strip('/')}/"
    
    @classmethod
    def default(cls, server_url: str = '') -> 'APIConfig':
        return cls(server_url=server_url)
    
    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.max_connections,
            'ssl': self.ssl.to_aiohttp_ssl(),
        }
    
    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        return {
            'headers': {'User-Agent': self.user_agent, **self.extra_headers},
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
    
    def get_request_kwargs(self) -> Dict[str, Any]:
        """Get kwargs passed to every request."""
        return {'proxy': self.proxy_url}
