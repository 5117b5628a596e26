"""Retrieval engine for chunking, scoring and ranking a session's documents."""
import logging
from typing import List, Sequence

from models.chunk import ScoredChunk
from models.document import Document
from services.chunking_engine import ChunkingEngine
from services.relevance_scorer import RelevanceScorer, extract_terms
from config import MAX_CHUNKS

logger = logging.getLogger(__name__)


def rank(scored_chunks: Sequence[ScoredChunk], top_k: int = MAX_CHUNKS) -> List[ScoredChunk]:
    """
    Keep matching chunks, best first.

    Chunks with a zero score are dropped. The sort is stable, so chunks with
    equal scores keep their input order.

    Args:
        scored_chunks: Chunks in chunker order
        top_k: Maximum number of chunks to return

    Returns:
        At most ``top_k`` chunks sorted by descending score
    """
    matching = [scored for scored in scored_chunks if scored.score > 0]
    return sorted(matching, key=lambda scored: scored.score, reverse=True)[:top_k]


class RetrievalEngine:
    """Orchestrate document reading, chunking, scoring and ranking."""

    def __init__(
        self,
        document_store,
        chunking_engine: ChunkingEngine = None,
        scorer: RelevanceScorer = None,
        top_k: int = MAX_CHUNKS
    ):
        """
        Initialize the retrieval engine.

        Args:
            document_store: Store providing ``read_content(document)``
            chunking_engine: ChunkingEngine instance (default: new instance)
            scorer: RelevanceScorer instance (default: new instance)
            top_k: Maximum number of chunks to retrieve
        """
        self.document_store = document_store
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.scorer = scorer or RelevanceScorer()
        self.top_k = top_k
        logger.info("Initialized RetrievalEngine")

    def retrieve(self, question: str, documents: Sequence[Document]) -> List[ScoredChunk]:
        """
        Retrieve the most relevant chunks for a question.

        Document content is read fresh on every call. A document whose content
        cannot be read contributes no chunks.

        Args:
            question: User question
            documents: Session documents in store order

        Returns:
            Ranked chunks, empty if no chunk matches any term
        """
        chunks = []
        for document in documents:
            content = self.document_store.read_content(document)
            chunks.extend(self.chunking_engine.chunk(content, document.id, document.name))

        terms = extract_terms(question)
        scored_chunks = self.scorer.score_chunks(chunks, terms)
        ranked = rank(scored_chunks, top_k=self.top_k)

        logger.info(
            f"Retrieved {len(ranked)} of {len(chunks)} chunks "
            f"from {len(documents)} documents ({len(terms)} terms)"
        )
        return ranked
