"""
Token-budget text chunking.

    from budget_chunker import Chunker
    chunker = Chunker(512, TiktokenCounter())
    chunks = chunker.chunk(text)
"""
from budget_chunker.core.chunking import (
    Chunk,
    Chunker,
    ChunkingConfigurationError,
    ChunkingError,
    DEFAULT_SEPARATORS,
    RetentionPolicy,
    SeparatorLevel,
    TokenCountError,
    reconstruct,
)
from budget_chunker.core.counters import EncoderCounter, TiktokenCounter, get_token_counter, word_counter

__version__ = "0.1.0"

__all__ = [
    'Chunk',
    'Chunker',
    'ChunkingConfigurationError',
    'ChunkingError',
    'DEFAULT_SEPARATORS',
    'EncoderCounter',
    'RetentionPolicy',
    'SeparatorLevel',
    'TiktokenCounter',
    'TokenCountError',
    'get_token_counter',
    'reconstruct',
    'word_counter',
]
