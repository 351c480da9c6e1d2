"""
Upload module for DRACOON file uploads.

Buffered uploads (FileUpload) read a source of known length in the
background or on the caller's task; streaming uploads (StreamUpload)
accept bytes as they are produced.
"""
from .facade import UploadFacade
from .coordinator import FileUpload
from .stream import StreamUpload
from .cancellation import CancellationToken
from .notifier import UploadCallbackRegistry, ProgressNotifier
from .models import (
    Classification,
    ResolutionStrategy,
    UploadState,
    Expiration,
    FileUploadRequest,
    Chunk,
    UploadConfig,
    UploadProgress,
    Node
)
from .protocols import (
    ApiClientProtocol,
    ByteSourceProtocol,
    UploadCallback,
    FileUploadCallback
)

__all__ = [
    # Main classes
    'UploadFacade',
    'FileUpload',
    'StreamUpload',
    'CancellationToken',
    'UploadCallbackRegistry',
    'ProgressNotifier',
    
    # Models
    'Classification',
    'ResolutionStrategy',
    'UploadState',
    'Expiration',
    'FileUploadRequest',
    'Chunk',
    'UploadConfig',
    'UploadProgress',
    'Node',
    
    # Protocols
    'ApiClientProtocol',
    'ByteSourceProtocol',
    'UploadCallback',
    'FileUploadCallback',
]
