"""Upload models."""
from .upload_models import (
    Classification,
    ResolutionStrategy,
    UploadState,
    Expiration,
    FileUploadRequest,
    Chunk,
    UploadConfig,
    UploadProgress
)
from .node import Node

__all__ = [
    'Classification',
    'ResolutionStrategy',
    'UploadState',
    'Expiration',
    'FileUploadRequest',
    'Chunk',
    'UploadConfig',
    'UploadProgress',
    'Node',
]
