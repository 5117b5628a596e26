"""Context assembly for generation prompts."""
from typing import Sequence

from models.chunk import ScoredChunk


def assemble_context(ranked_chunks: Sequence[ScoredChunk]) -> str:
    """
    Render ranked chunks as numbered sources separated by blank lines.

    Chunk text is included verbatim.
    """
    return "\n\n".join(
        f"Source {i} ({scored.chunk.source_doc_name}):\n{scored.chunk.text}"
        for i, scored in enumerate(ranked_chunks, start=1)
    )
