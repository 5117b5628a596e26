"""Data models for DocQA RAG service."""
from .document import Document
from .chunk import Chunk, ScoredChunk
from .answer import Answer, AnswerBlock, AnswerState, BlockKind, Citation
from .api import (
    AskRequest,
    AskResponse,
    Block,
    DocumentInfo,
    HealthResponse,
    MessageResponse,
    Source,
    UploadResponse,
)

__all__ = [
    "Document",
    "Chunk",
    "ScoredChunk",
    "Answer",
    "AnswerBlock",
    "AnswerState",
    "BlockKind",
    "Citation",
    "AskRequest",
    "AskResponse",
    "Block",
    "DocumentInfo",
    "HealthResponse",
    "MessageResponse",
    "Source",
    "UploadResponse",
]
