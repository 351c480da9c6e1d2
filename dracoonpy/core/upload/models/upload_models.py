"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Dict, Any, Optional


class Classification(IntEnum):
    """Classification of an uploaded file."""
    PUBLIC = 1
    INTERNAL = 2
    CONFIDENTIAL = 3
    STRICTLY_CONFIDENTIAL = 4


class ResolutionStrategy(Enum):
    """What the server does when the target name already exists."""
    AUTORENAME = 'autorename'
    OVERWRITE = 'overwrite'
    FAIL = 'fail'


class UploadState(Enum):
    """
    Lifecycle of a single upload attempt.
    
    CREATED -> RUNNING -> COMPLETING -> COMPLETED, with CANCELED and FAILED
    as terminal states.
    """
    CREATED = 'created'
    RUNNING = 'running'
    COMPLETING = 'completing'
    COMPLETED = 'completed'
    CANCELED = 'canceled'
    FAILED = 'failed'
    
    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.COMPLETED, UploadState.CANCELED, UploadState.FAILED)


@dataclass(frozen=True)
class Expiration:
    """
    Expiration settings sent with the create request.
    
    Attributes:
        enable_expiration: False when the date is the epoch (expiration off)
        expire_at: Expiration timestamp
    """
    enable_expiration: bool
    expire_at: datetime
    
    @classmethod
    def from_date(cls, expire_at: datetime) -> 'Expiration':
        """Build expiration settings from a date."""
        if expire_at.tzinfo is None:
            expire_at = expire_at.replace(tzinfo=timezone.utc)
        return cls(enable_expiration=expire_at.timestamp() != 0, expire_at=expire_at)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'enableExpiration': self.enable_expiration,
            'expireAt': self.expire_at.isoformat(),
        }


@dataclass
class FileUploadRequest:
    """
    Describes the file to create on the server.
    
    Attributes:
        parent_id: ID of the target room or folder
        name: Name of the new file
        classification: File classification
        notes: Optional notes
        expiration_date: Optional expiration date
        resolution_strategy: Conflict resolution when the name exists
    
    Example:
        >>> request = FileUploadRequest(parent_id=42, name="report.pdf")
        >>> request.to_create_dict()
        {'parentId': 42, 'name': 'report.pdf', 'classification': 2}
    """
    parent_id: int
    name: str
    classification: Classification = Classification.INTERNAL
    notes: Optional[str] = None
    expiration_date: Optional[datetime] = None
    resolution_strategy: ResolutionStrategy = ResolutionStrategy.AUTORENAME
    
    def __post_init__(self):
        """Validate and normalize request."""
        if self.parent_id is None or self.parent_id <= 0:
            raise ValueError("Parent ID must be positive")
        if not self.name or not self.name.strip():
            raise ValueError("File name must not be empty")
        if isinstance(self.classification, int) and not isinstance(self.classification, Classification):
            self.classification = Classification(self.classification)
        if isinstance(self.resolution_strategy, str):
            self.resolution_strategy = ResolutionStrategy(self.resolution_strategy)
    
    @property
    def expiration(self) -> Optional[Expiration]:
        if self.expiration_date is None:
            return None
        return Expiration.from_date(self.expiration_date)
    
    def to_create_dict(self) -> Dict[str, Any]:
        """Convert to the create-upload request body."""
        result: Dict[str, Any] = {
            'parentId': self.parent_id,
            'name': self.name,
            'classification': int(self.classification),
        }
        if self.notes is not None:
            result['notes'] = self.notes
        expiration = self.expiration
        if expiration is not None:
            result['expiration'] = expiration.to_dict()
        return result


@dataclass(frozen=True)
class Chunk:
    """
    A contiguous byte range of the uploaded content.
    
    Attributes:
        offset: Bytes transmitted before this chunk
        data: Chunk bytes
    """
    offset: int
    data: bytes
    
    @property
    def length(self) -> int:
        return len(self.data)
    
    @property
    def end(self) -> int:
        return self.offset + self.length
    
    @property
    def content_range(self) -> str:
        """Value of the Content-Range header for this chunk."""
        return f"bytes {self.offset}-{self.end}/*"


@dataclass
class UploadConfig:
    """
    Buffer sizes and progress throttling.
    
    Attributes:
        read_size: Bytes read from the source per chunk request
        block_size: Bytes written per block inside a chunk request
        progress_interval_ms: Minimum time between two progress events
        stream_chunk_size: Chunk size of streaming uploads
    """
    read_size: int = 2 * 1024 * 1024
    block_size: int = 2 * 1024
    progress_interval_ms: int = 100
    stream_chunk_size: int = 256 * 1024
    
    def __post_init__(self):
        for name in ('read_size', 'block_size', 'stream_chunk_size'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.progress_interval_ms < 0:
            raise ValueError("progress_interval_ms must not be negative")


@dataclass
class UploadProgress:
    """
    Upload progress information.
    
    Attributes:
        bytes_sent: Bytes transmitted so far
        bytes_total: Declared source length
    """
    bytes_sent: int = 0
    bytes_total: int = 0
    
    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.bytes_total == 0:
            return 0.0
        return (self.bytes_sent / self.bytes_total) * 100
    
    @property
    def is_complete(self) -> bool:
        return self.bytes_sent >= self.bytes_total
