"""
Chunking module for text processing.

Splits text into token-budget chunks at the most meaningful boundaries.
"""
from budget_chunker.core.chunking.models import (
    Chunk,
    ChunkingConfigurationError,
    ChunkingError,
    ChunkStatistics,
    RetentionPolicy,
    SeparatorLevel,
    Span,
    StatisticsCalculationError,
    TokenCountError,
)
from budget_chunker.core.chunking.separators import DEFAULT_SEPARATORS
from budget_chunker.core.chunking.statistics import calculate_chunk_statistics
from budget_chunker.core.chunking.token_cache import TokenCountCache
from budget_chunker.core.chunking.token_chunker import Chunker, reconstruct

__all__ = [
    'Chunk',
    'Chunker',
    'ChunkingConfigurationError',
    'ChunkingError',
    'ChunkStatistics',
    'DEFAULT_SEPARATORS',
    'RetentionPolicy',
    'SeparatorLevel',
    'Span',
    'StatisticsCalculationError',
    'TokenCountCache',
    'TokenCountError',
    'calculate_chunk_statistics',
    'reconstruct',
]
