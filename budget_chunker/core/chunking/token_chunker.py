"""
Token-budget text chunking with semantic boundary preservation.

This module ties the separator hierarchy, the recursive splitter and the
greedy merger together behind a single Chunker class. Token counting is
delegated to a caller-supplied callable, e.g. a tiktoken encoder.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List

from .merger import merge_spans
from .models import Chunk, ChunkingConfigurationError, ChunkStatistics
from .separators import DEFAULT_SEPARATORS
from .splitter import RecursiveSplitter
from .statistics import calculate_chunk_statistics
from .token_cache import TokenCountCache, TokenCounter

logger = logging.getLogger(__name__)


class Chunker:
    """
    Splits text into chunks that fit a token budget.

    Prefers splitting at paragraph, line, sentence, clause and word
    boundaries, in that order, then at punctuation and finally between
    characters. Adjacent small pieces are merged back greedily.

    Example:
        >>> chunker = Chunker(4, lambda s: len(s.split()))
        >>> chunker.chunk("The quick brown fox jumps over the lazy dog.")
        ['The quick brown fox', 'jumps over the', 'lazy dog.']
    """

    def __init__(
        self,
        max_tokens: int,
        token_counter: TokenCounter,
        separators=DEFAULT_SEPARATORS,
        max_workers: int = 1
    ):
        """
        Initialize the Chunker.

        Args:
            max_tokens: Maximum tokens per chunk (must be > 0)
            token_counter: Callable returning the token count of a string
            separators: Separator hierarchy, coarsest level first
            max_workers: Threads used to evaluate independent spans; only
                raise above 1 if the counter is thread-safe

        Raises:
            ChunkingConfigurationError: on a non-positive budget, a
                non-callable counter or an invalid separator table
        """
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
            raise ChunkingConfigurationError(
                f"max_tokens must be a positive integer, got {max_tokens!r}"
            )
        if not callable(token_counter):
            raise ChunkingConfigurationError("token_counter must be callable")
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise ChunkingConfigurationError(
                f"max_workers must be an integer >= 1, got {max_workers!r}"
            )

        self.max_tokens = max_tokens
        self.token_counter = token_counter
        self.max_workers = max_workers
        self.splitter = RecursiveSplitter(max_tokens, separators)
        self.last_cache_stats: Dict[str, int] = {}

    @property
    def separators(self):
        return self.splitter.separators

    def chunk(self, text: str) -> List[str]:
        """
        Split text into chunk strings.

        Args:
            text: Input text to chunk

        Returns:
            Ordered list of chunk strings; empty for empty input
        """
        return [chunk.text for chunk in self.chunk_text(text)]

    def chunk_text(self, text: str) -> List[Chunk]:
        """
        Split text into chunks with offsets and token counts.

        Main algorithm:
        1. Split the whole text recursively until every piece fits
        2. Merge adjacent pieces greedily while they still fit
        3. Materialize chunks, recording the separator text after each one

        Args:
            text: Input text to chunk

        Returns:
            Ordered list of Chunk objects. ``reconstruct()`` on the result
            returns ``text`` unchanged.
        """
        if not text:
            self.last_cache_stats = {}
            return []

        # Fresh cache per call: the counter may close over call-specific state
        cache = TokenCountCache(text, self.token_counter)

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                spans = self.splitter.split(text, cache, map_func=executor.map)
        else:
            spans = self.splitter.split(text, cache)

        spans = merge_spans(spans, self.max_tokens, cache)

        chunks = []
        for i, span in enumerate(spans):
            next_start = spans[i + 1].start if i + 1 < len(spans) else len(text)
            chunks.append(Chunk(
                text=span.text(text),
                token_count=cache.count_span(span),
                start=span.start,
                end=span.end,
                separator=text[span.end:next_start],
            ))

        self.last_cache_stats = cache.stats()
        logger.debug(
            "Chunked %d characters into %d chunks (budget %d, %d counter calls, %d cache hits)",
            len(text), len(chunks), self.max_tokens, cache.misses, cache.hits,
        )
        return chunks

    def get_stats(self, chunks: List[Chunk]) -> ChunkStatistics:
        """
        Get statistics about chunked text.

        Args:
            chunks: List of Chunk objects from chunk_text()

        Returns:
            ChunkStatistics, including cache counters of the last call
        """
        stats = calculate_chunk_statistics(chunks, self.max_tokens)
        stats.cache_hits = self.last_cache_stats.get("cache_hits", 0)
        stats.cache_misses = self.last_cache_stats.get("cache_misses", 0)
        return stats


def reconstruct(chunks: Iterable[Chunk]) -> str:
    """Rebuild the original text from chunks and their separators."""
    return "".join(chunk.text + chunk.separator for chunk in chunks)
