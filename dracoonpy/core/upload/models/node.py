"""Remote node descriptor returned when an upload completes."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Node:
    """
    A file node on the DRACOON server.
    
    Only the fields needed by upload callers are mapped; the complete API
    payload is kept in `raw`.
    """
    id: int
    name: str
    type: str = 'file'
    parent_id: Optional[int] = None
    size: Optional[int] = None
    classification: Optional[int] = None
    notes: Optional[str] = None
    expire_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    hash: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    
    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Node':
        """Create from an API node payload."""
        if not isinstance(data, dict) or 'id' not in data:
            raise ValueError(f"Invalid node payload: {data!r}")
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            type=data.get('type', 'file'),
            parent_id=data.get('parentId'),
            size=data.get('size'),
            classification=data.get('classification'),
            notes=data.get('notes'),
            expire_at=data.get('expireAt'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
            hash=data.get('hash'),
            raw=data
        )
