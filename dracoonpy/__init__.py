"""
dracoonpy - Async Python uploads for DRACOON storage.

Usage:
    >>> from dracoonpy import DracoonClient, FileUploadRequest
    >>> 
    >>> async with DracoonClient("https://dracoon.example.com", token) as dracoon:
    ...     request = FileUploadRequest(parent_id=42, name="data.bin")
    ...     node = await dracoon.uploads.upload_path(request, "data.bin")
"""
import logging
from .client import DracoonClient

# Configuration
from .core.api import (
    APIConfig,
    SSLConfig,
    TimeoutConfig,
    AsyncAPIClient,
    ApiErrorCode,
    StaticTokenProvider,
    CallableTokenProvider
)

# Uploads
from .core.upload import (
    UploadFacade,
    FileUpload,
    StreamUpload,
    FileUploadCallback,
    FileUploadRequest,
    Classification,
    ResolutionStrategy,
    UploadConfig,
    Node
)

# Errors
from .core.exceptions import (
    UploadPhase,
    DracoonException,
    TransportError,
    InsecureTransportError,
    UploadApiError,
    LocalSourceError,
    BoundsError,
    StreamClosedError,
    UploadStreamError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for dracoonpy modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'dracoonpy',
        'dracoonpy.client',
        'dracoonpy.api',
        'dracoonpy.upload',
        'dracoonpy.upload.chunk',
        'dracoonpy.upload.session',
        'dracoonpy.upload.stream',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'DracoonClient',
    'APIConfig',
    'SSLConfig',
    'TimeoutConfig',
    'AsyncAPIClient',
    'ApiErrorCode',
    'StaticTokenProvider',
    'CallableTokenProvider',
    'UploadFacade',
    'FileUpload',
    'StreamUpload',
    'FileUploadCallback',
    'FileUploadRequest',
    'Classification',
    'ResolutionStrategy',
    'UploadConfig',
    'Node',
    'UploadPhase',
    'DracoonException',
    'TransportError',
    'InsecureTransportError',
    'UploadApiError',
    'LocalSourceError',
    'BoundsError',
    'StreamClosedError',
    'UploadStreamError',
    'setup_logging',
]
