"""
Custom exceptions for DRACOON upload operations.

Every error raised by the upload subsystem derives from DracoonException.
"""
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .api.errors import ApiErrorCode


class UploadPhase(Enum):
    """Phase of the three-step upload protocol."""
    CREATE = 'create'
    UPLOAD_CHUNK = 'upload_chunk'
    COMPLETE = 'complete'


class DracoonException(Exception):
    """Base exception for all DRACOON-related errors."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            cause: Underlying exception (if any)
        """
        self.cause = cause
        super().__init__(message)


class TransportError(DracoonException):
    """Server communication failed (network I/O, timeouts)."""
    pass


class InsecureTransportError(TransportError):
    """TLS handshake or certificate verification failed."""
    pass


class UploadApiError(DracoonException):
    """
    The server answered, but signaled a failure.
    
    Attributes:
        phase: Upload phase which failed
        code: Mapped API error code
        status: HTTP status of the response
    """
    
    def __init__(
        self,
        phase: UploadPhase,
        code: 'ApiErrorCode',
        status: Optional[int] = None
    ) -> None:
        self.phase = phase
        self.code = code
        self.status = status
        super().__init__(f"{phase.value} failed with {code.name}: {code.message}")


class LocalSourceError(DracoonException):
    """Reading the local byte source failed."""
    pass


class BoundsError(DracoonException, IndexError):
    """A stream write supplied an invalid offset/length combination."""
    pass


class StreamClosedError(BoundsError):
    """A write or close was attempted on an already closed stream."""
    pass


class UploadStreamError(DracoonException, IOError):
    """Wraps any failure of a streaming upload for the caller."""
    pass


class UploadCanceledError(DracoonException):
    """Raised internally when a file upload observes its cancel flag."""
    
    def __init__(self, upload_id: str) -> None:
        self.upload_id = upload_id
        super().__init__(f"Upload '{upload_id}' was canceled")
