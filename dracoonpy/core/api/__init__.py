"""DRACOON REST transport, configuration and errors."""
from .errors import ApiErrorCode, APIErrorCodes, DracoonErrorParser
from .config import APIConfig, SSLConfig, TimeoutConfig
from .async_client import AsyncAPIClient, ApiResponse
from .auth import AccessTokenProvider, StaticTokenProvider, CallableTokenProvider

__all__ = [
    'AsyncAPIClient',
    'ApiResponse',
    
    # Auth
    'AccessTokenProvider',
    'StaticTokenProvider',
    'CallableTokenProvider',
    
    # Configuration
    'APIConfig',
    'SSLConfig',
    'TimeoutConfig',
    
    # Errors
    'ApiErrorCode',
    'APIErrorCodes',
    'DracoonErrorParser',
]
