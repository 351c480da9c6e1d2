"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader
from .session_service import UploadSession
from .chunk_service import ChunkTransmitter

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'UploadSession',
    'ChunkTransmitter',
]
