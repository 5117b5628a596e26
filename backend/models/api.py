"""API request and response models."""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AskRequest(BaseModel):
    """Question submitted to the ask endpoint."""
    question: str = Field(..., min_length=1)


class Source(BaseModel):
    """Citation returned alongside an answer."""
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    document_name: str = Field(..., alias="documentName")
    snippet: str
    score: int


class Block(BaseModel):
    """Structured answer block for rich rendering."""
    model_config = ConfigDict(populate_by_name=True)

    kind: str
    text: str = ""
    items: List[str] = Field(default_factory=list)
    document_name: Optional[str] = Field(None, alias="documentName")
    index: Optional[int] = None


class AskResponse(BaseModel):
    """Answer returned by the ask endpoint."""
    answer: str
    sources: List[Source]
    model: str
    blocks: List[Block] = Field(default_factory=list)


class DocumentInfo(BaseModel):
    """Public view of a stored document."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    size: int
    upload_date: datetime = Field(..., alias="uploadDate")


class UploadResponse(BaseModel):
    message: str
    document: DocumentInfo


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    services: Dict[str, str]
