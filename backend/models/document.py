"""Document data models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass
class Document:
    """Represents an uploaded document owned by a session."""
    id: str
    name: str
    size_bytes: int
    uploaded_at: datetime
    content_location: str  # Path of the stored file

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size_bytes": self.size_bytes,
            "uploaded_at": self.uploaded_at.isoformat(),
            "content_location": self.content_location,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        return cls(
            id=data["id"],
            name=data["name"],
            size_bytes=int(data["size_bytes"]),
            uploaded_at=datetime.fromisoformat(data["uploaded_at"]),
            content_location=data["content_location"],
        )
