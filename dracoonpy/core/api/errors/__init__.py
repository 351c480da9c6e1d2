"""DRACOON API errors and error-code parsing."""
from .api_errors import ApiErrorCode, APIErrorCodes, DracoonErrorParser

__all__ = [
    'ApiErrorCode',
    'APIErrorCodes',
    'DracoonErrorParser',
]
