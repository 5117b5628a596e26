"""Answer generation with extractive fallback."""
import asyncio
import logging
import re
from typing import List, Optional, Sequence

from models.answer import Answer, AnswerBlock, AnswerState, BlockKind, Citation
from models.chunk import ScoredChunk
from services.answer_renderer import render_markdown
from services.context_assembler import assemble_context
from services.llm_client import LLMClient, LLMClientError
from services.retrieval_engine import RetrievalEngine
from config import (
    EXCERPT_LENGTH,
    FALLBACK_EXCERPTS,
    FALLBACK_MODEL_LABEL,
    SNIPPET_LENGTH,
)

logger = logging.getLogger(__name__)


NO_DOCUMENTS_MESSAGE = "I don't have enough context. Please upload some documents first."

NO_MATCH_HEADING = "No Relevant Information Found"
NO_MATCH_MESSAGE = "I couldn't find any content in your documents that matches your question."
NO_MATCH_SUGGESTIONS = [
    "Upload more documents related to your question",
    "Rephrase your question using different keywords",
    "Check if your documents contain the information you're looking for",
]

FALLBACK_HEADING = "Key Information Found"
FALLBACK_NOTE = (
    "These are the most relevant excerpts from your documents. "
    "AI summarization is temporarily unavailable, but these direct quotes "
    "should help answer your question."
)

_MARKDOWN_MARKERS = re.compile(r"[#*`]")
_WHITESPACE = re.compile(r"\s+")


def clean_excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    """Strip markdown markers, collapse whitespace and truncate to ``limit`` characters."""
    cleaned = _WHITESPACE.sub(" ", _MARKDOWN_MARKERS.sub("", text)).strip()
    if len(cleaned) > limit:
        return cleaned[:limit] + "..."
    return cleaned


def build_fallback_blocks(
    ranked_chunks: Sequence[ScoredChunk],
    max_excerpts: int = FALLBACK_EXCERPTS,
    excerpt_length: int = EXCERPT_LENGTH
) -> List[AnswerBlock]:
    """
    Build the extractive summary used when generation is unavailable.

    The result depends only on the first ``max_excerpts`` chunks and their order.
    """
    blocks = [AnswerBlock(kind=BlockKind.HEADING, text=FALLBACK_HEADING)]
    for i, scored in enumerate(ranked_chunks[:max_excerpts], start=1):
        if i > 1:
            blocks.append(AnswerBlock(kind=BlockKind.RULE))
        blocks.append(AnswerBlock(
            kind=BlockKind.EXCERPT,
            text=clean_excerpt(scored.chunk.text, excerpt_length),
            document_name=scored.chunk.source_doc_name,
            index=i
        ))
    blocks.append(AnswerBlock(kind=BlockKind.RULE))
    blocks.append(AnswerBlock(kind=BlockKind.NOTE, text=FALLBACK_NOTE))
    return blocks


def to_citation(scored: ScoredChunk, snippet_length: int = SNIPPET_LENGTH) -> Citation:
    """Map a ranked chunk to its caller-facing citation."""
    return Citation(
        document_id=scored.chunk.source_doc_id,
        document_name=scored.chunk.source_doc_name,
        snippet=scored.chunk.text[:snippet_length] + "...",
        score=scored.score
    )


class AnswerGenerator:
    """Answers questions from a session's documents, generating or extracting."""

    def __init__(
        self,
        document_store,
        retrieval_engine: RetrievalEngine,
        llm_client: Optional[LLMClient] = None,
        fallback_model_label: str = FALLBACK_MODEL_LABEL
    ):
        """
        Initialize AnswerGenerator.

        Args:
            document_store: Store providing ``list_documents(session_key)``
            retrieval_engine: RetrievalEngine used to rank chunks
            llm_client: Generation client, or None when no credential is configured
            fallback_model_label: Model label reported for non-generated answers
        """
        self.document_store = document_store
        self.retrieval_engine = retrieval_engine
        self.llm_client = llm_client
        self.fallback_model_label = fallback_model_label

    @property
    def generation_available(self) -> bool:
        """Whether a generation client is configured."""
        return self.llm_client is not None

    async def answer(self, question: str, session_key: str) -> Answer:
        """
        Answer a question from the session's documents.

        Generation failures never propagate; they resolve to the extractive
        fallback answer.

        Args:
            question: Non-empty user question
            session_key: Session owning the documents

        Returns:
            Answer with text, blocks, citations and model label
        """
        # Store reads and chunk scoring run off the event loop
        documents = await asyncio.to_thread(self.document_store.list_documents, session_key)
        if not documents:
            logger.info(f"No documents in session {session_key}")
            return self._canned_answer(
                [AnswerBlock(kind=BlockKind.PARAGRAPH, text=NO_DOCUMENTS_MESSAGE)],
                AnswerState.NO_DOCUMENTS
            )

        ranked = await asyncio.to_thread(self.retrieval_engine.retrieve, question, documents)
        if not ranked:
            logger.info(f"No relevant chunks for question in session {session_key}")
            return self._canned_answer(
                [
                    AnswerBlock(kind=BlockKind.HEADING, text=NO_MATCH_HEADING),
                    AnswerBlock(kind=BlockKind.PARAGRAPH, text=NO_MATCH_MESSAGE),
                    AnswerBlock(kind=BlockKind.BULLETS, text="Suggestions:", items=list(NO_MATCH_SUGGESTIONS)),
                ],
                AnswerState.NO_MATCH
            )

        sources = [to_citation(scored) for scored in ranked]
        context = assemble_context(ranked)

        generated = await self._generate(question, context)
        if generated is not None:
            text, model_label = generated
            return Answer(
                text=text,
                blocks=[AnswerBlock(kind=BlockKind.PARAGRAPH, text=text)],
                sources=sources,
                model_label=model_label,
                state=AnswerState.GENERATED
            )

        logger.info("Generation unavailable, using extractive fallback")
        blocks = build_fallback_blocks(ranked)
        return Answer(
            text=render_markdown(blocks),
            blocks=blocks,
            sources=sources,
            model_label=self.fallback_model_label,
            state=AnswerState.FALLBACK
        )

    async def _generate(self, question: str, context: str):
        """Return ``(text, model)`` from one generation attempt, or None on failure."""
        if self.llm_client is None:
            logger.warning("No generation client configured")
            return None

        prompt = LLMClient.build_prompt(question, context)
        try:
            response = await self.llm_client.generate(prompt)
        except LLMClientError as e:
            logger.warning(f"Generation failed ({e.error.code}): {e.error.message}")
            return None

        if not response.text or not response.text.strip():
            logger.warning("Generation returned empty text")
            return None
        return response.text, response.model_used

    def _canned_answer(self, blocks: List[AnswerBlock], state: AnswerState) -> Answer:
        return Answer(
            text=render_markdown(blocks),
            blocks=blocks,
            sources=[],
            model_label=self.fallback_model_label,
            state=state
        )
