"""Answer data models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class AnswerState(str, Enum):
    """Terminal state reached while answering a question."""
    NO_DOCUMENTS = "no_documents"
    NO_MATCH = "no_match"
    GENERATED = "generated"
    FALLBACK = "fallback"


class BlockKind(str, Enum):
    """Kinds of structured answer blocks."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    EXCERPT = "excerpt"
    RULE = "rule"
    BULLETS = "bullets"
    NOTE = "note"


@dataclass(frozen=True)
class AnswerBlock:
    """A single presentational unit of an answer."""
    kind: BlockKind
    text: str = ""
    items: List[str] = field(default_factory=list)
    document_name: Optional[str] = None
    index: Optional[int] = None  # 1-based position of an excerpt


@dataclass(frozen=True)
class Citation:
    """Caller-facing record of a chunk that supported the answer."""
    document_id: str
    document_name: str
    snippet: str
    score: int


@dataclass
class Answer:
    """Final answer payload for one question."""
    text: str
    blocks: List[AnswerBlock]
    sources: List[Citation]
    model_label: str
    state: AnswerState
