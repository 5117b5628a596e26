"""Keyword relevance scoring between a question and document chunks."""
import string
from typing import Iterable, List, Set

from models.chunk import Chunk, ScoredChunk
from config import MIN_TERM_LENGTH


def extract_terms(question: str, min_term_length: int = MIN_TERM_LENGTH) -> Set[str]:
    """
    Derive the set of matching terms from a question.

    Tokens are split on whitespace, lowercased and stripped of surrounding
    punctuation. Only tokens strictly longer than ``min_term_length`` are kept.

    Args:
        question: Question text as submitted
        min_term_length: Minimum length a term must exceed

    Returns:
        Set of lowercase terms
    """
    terms = set()
    for token in question.lower().split():
        token = token.strip(string.punctuation)
        if len(token) > min_term_length:
            terms.add(token)
    return terms


class RelevanceScorer:
    """Scores chunks by the number of distinct question terms they contain."""

    def score(self, chunk: Chunk, terms: Iterable[str]) -> int:
        """
        Count distinct terms occurring as substrings of the chunk text.

        Matching is plain case-insensitive substring containment, so a term
        also matches inside a longer word.
        """
        text = chunk.text.lower()
        return sum(1 for term in set(terms) if term in text)

    def score_chunks(self, chunks: Iterable[Chunk], terms: Set[str]) -> List[ScoredChunk]:
        """Score every chunk, preserving input order."""
        return [ScoredChunk(chunk=chunk, score=self.score(chunk, terms)) for chunk in chunks]
