"""Core of dracoonpy: REST transport, exceptions and uploads."""
from .exceptions import (
    UploadPhase,
    DracoonException,
    TransportError,
    InsecureTransportError,
    UploadApiError,
    LocalSourceError,
    BoundsError,
    StreamClosedError,
    UploadStreamError,
    UploadCanceledError
)

__all__ = [
    'UploadPhase',
    'DracoonException',
    'TransportError',
    'InsecureTransportError',
    'UploadApiError',
    'LocalSourceError',
    'BoundsError',
    'StreamClosedError',
    'UploadStreamError',
    'UploadCanceledError',
]
