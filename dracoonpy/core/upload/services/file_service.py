"""
Local file validation and reading.

Single Responsibility: validation and opening are separate classes.
"""
from pathlib import Path
from typing import Tuple, Union
import aiofiles


class FileValidator:
    """
    Validates local files before upload.
    
    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """
    
    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Tuple of (validated Path, file size in bytes)
            
        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path
        
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        
        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")
        
        return path, path.stat().st_size


class AsyncFileReader:
    """
    Opens local files as non-blocking byte sources.
    
    The returned aiofiles handle has an awaitable `read(size)`, which the
    file upload driver accepts as a source.
    """
    
    def open(self, file_path: Path):
        """Return an aiofiles context manager opening `file_path` for reading."""
        return aiofiles.open(file_path, 'rb')
