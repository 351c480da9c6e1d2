"""DRACOON API error codes and per-phase response parsing."""
from enum import IntEnum
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..async_client import ApiResponse


class ApiErrorCode(IntEnum):
    """Error codes reported for failed upload requests."""
    
    AUTH_UNAUTHORIZED = -10000
    PERMISSION_CREATE_ERROR = -30100
    PERMISSION_UPLOAD_ERROR = -30200
    NODE_TARGET_NOT_FOUND = -40000
    NODE_UPLOAD_NOT_FOUND = -40100
    NODE_FILE_ALREADY_EXISTS = -40200
    VALIDATION_UNKNOWN_ERROR = -80000
    VALIDATION_FILE_NAME_INVALID = -80006
    VALIDATION_CLASSIFICATION_INVALID = -80007
    VALIDATION_EXPIRATION_DATE_IN_PAST = -80008
    FILE_UPLOAD_INVALID_RANGE = -80021
    SERVER_UNKNOWN_ERROR = -90000
    SERVER_FILE_TOO_LARGE = -90100
    SERVER_INSUFFICIENT_STORAGE = -90200
    
    @property
    def message(self) -> str:
        """Human readable description."""
        return APIErrorCodes.get_message(self)


class APIErrorCodes:
    """Messages for DRACOON API error codes."""
    
    ERROR_CODES: Dict[int, str] = {
        -10000: 'Unauthorized: the access token is missing, invalid or expired.',
        -30100: 'Missing permission to create files in the target node.',
        -30200: 'Missing permission to upload to this upload channel.',
        -40000: 'Target room or folder not found.',
        -40100: 'Upload channel not found or already closed.',
        -40200: 'A file with this name already exists.',
        -80000: 'The request was rejected by server-side validation.',
        -80006: 'Invalid file name.',
        -80007: 'Invalid classification.',
        -80008: 'Expiration date is in the past.',
        -80021: 'Invalid content range: chunk is out of order or overlapping.',
        -90000: 'An unknown server error occurred.',
        -90100: 'File exceeds the maximum upload size.',
        -90200: 'Not enough free storage on the server.',
    }
    
    @classmethod
    def get_message(cls, code: int) -> str:
        """Gets error message for error code."""
        return cls.ERROR_CODES.get(int(code), f"Unknown error: {code}")


class DracoonErrorParser:
    """
    Maps unsuccessful upload responses to ApiErrorCode values.
    
    A known `errorCode` in the response body wins; otherwise the HTTP
    status is mapped according to the upload phase.
    """
    
    @staticmethod
    def _body_code(response: 'ApiResponse') -> Optional[ApiErrorCode]:
        body = response.body
        if not isinstance(body, dict):
            return None
        try:
            return ApiErrorCode(int(body.get('errorCode')))
        except (TypeError, ValueError):
            return None
    
    @classmethod
    def parse_create_upload_error(cls, response: 'ApiResponse') -> ApiErrorCode:
        """Map a failed create-upload response."""
        code = cls._body_code(response)
        if code is not None:
            return code
        return {
            400: ApiErrorCode.VALIDATION_UNKNOWN_ERROR,
            401: ApiErrorCode.AUTH_UNAUTHORIZED,
            403: ApiErrorCode.PERMISSION_CREATE_ERROR,
            404: ApiErrorCode.NODE_TARGET_NOT_FOUND,
            507: ApiErrorCode.SERVER_INSUFFICIENT_STORAGE,
        }.get(response.status, ApiErrorCode.SERVER_UNKNOWN_ERROR)
    
    @classmethod
    def parse_upload_error(cls, response: 'ApiResponse') -> ApiErrorCode:
        """Map a failed chunk upload response."""
        code = cls._body_code(response)
        if code is not None:
            return code
        return {
            400: ApiErrorCode.FILE_UPLOAD_INVALID_RANGE,
            401: ApiErrorCode.AUTH_UNAUTHORIZED,
            403: ApiErrorCode.PERMISSION_UPLOAD_ERROR,
            404: ApiErrorCode.NODE_UPLOAD_NOT_FOUND,
            413: ApiErrorCode.SERVER_FILE_TOO_LARGE,
            416: ApiErrorCode.FILE_UPLOAD_INVALID_RANGE,
            507: ApiErrorCode.SERVER_INSUFFICIENT_STORAGE,
        }.get(response.status, ApiErrorCode.SERVER_UNKNOWN_ERROR)
    
    @classmethod
    def parse_complete_upload_error(cls, response: 'ApiResponse') -> ApiErrorCode:
        """Map a failed complete-upload response."""
        code = cls._body_code(response)
        if code is not None:
            return code
        return {
            400: ApiErrorCode.VALIDATION_FILE_NAME_INVALID,
            401: ApiErrorCode.AUTH_UNAUTHORIZED,
            403: ApiErrorCode.PERMISSION_UPLOAD_ERROR,
            404: ApiErrorCode.NODE_UPLOAD_NOT_FOUND,
            409: ApiErrorCode.NODE_FILE_ALREADY_EXISTS,
            507: ApiErrorCode.SERVER_INSUFFICIENT_STORAGE,
        }.get(response.status, ApiErrorCode.SERVER_UNKNOWN_ERROR)
