"""Chunk data models."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """Represents a passage of a document, the unit of retrieval and citation."""
    source_doc_id: str
    source_doc_name: str
    text: str


@dataclass(frozen=True)
class ScoredChunk:
    """Chunk with the number of distinct question terms it contains."""
    chunk: Chunk
    score: int
