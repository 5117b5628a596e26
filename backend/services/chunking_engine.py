"""Chunking engine splitting documents on blank-line boundaries."""
import logging
import re
from typing import List, Optional

from models.chunk import Chunk
from config import MIN_CHUNK_LENGTH

logger = logging.getLogger(__name__)


class ChunkingEngine:
    """Segments document text into paragraph chunks."""

    # One or more blank lines, where a blank line may hold whitespace
    BLANK_LINE_PATTERN = re.compile(r"\n\s*\n")

    def __init__(self, min_chunk_length: int = MIN_CHUNK_LENGTH):
        """
        Initialize ChunkingEngine.

        Args:
            min_chunk_length: Chunks must be strictly longer than this after trimming
        """
        self.min_chunk_length = min_chunk_length

    def chunk(self, text: Optional[str], doc_id: str, doc_name: str) -> List[Chunk]:
        """
        Split text into paragraph chunks tagged with their source document.

        Segments keep their input order. Segments whose trimmed length does
        not exceed ``min_chunk_length`` are dropped.

        Args:
            text: Raw document text (may be empty)
            doc_id: Source document ID
            doc_name: Source document name

        Returns:
            List of Chunk objects
        """
        if not text:
            return []

        chunks = []
        for segment in self.BLANK_LINE_PATTERN.split(text):
            segment = segment.strip()
            if len(segment) > self.min_chunk_length:
                chunks.append(Chunk(
                    source_doc_id=doc_id,
                    source_doc_name=doc_name,
                    text=segment
                ))

        logger.debug(f"Chunked {doc_name}: {len(chunks)} chunks")
        return chunks
