"""Services for DocQA RAG service."""
from .chunking_engine import ChunkingEngine
from .relevance_scorer import RelevanceScorer, extract_terms
from .retrieval_engine import RetrievalEngine, rank
from .context_assembler import assemble_context
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .document_store import CorruptIndexError, DocumentStore, InvalidSessionKeyError
from .answer_renderer import render_markdown
from .answer_generator import AnswerGenerator, build_fallback_blocks

__all__ = ['ChunkingEngine', 'RelevanceScorer', 'extract_terms', 'RetrievalEngine', 'rank', 'assemble_context', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'CorruptIndexError', 'DocumentStore', 'InvalidSessionKeyError', 'render_markdown', 'AnswerGenerator', 'build_fallback_blocks']
