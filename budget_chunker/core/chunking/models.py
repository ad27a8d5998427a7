"""
Data models for token-budget chunking.

Provides enums, dataclasses, and exceptions for the chunking system.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# === Enums ===

class RetentionPolicy(Enum):
    """Which piece keeps the separator text when a span is split."""
    ATTACH_TO_PRECEDING = "attach_to_preceding"
    ATTACH_TO_FOLLOWING = "attach_to_following"
    DROP = "drop"


# === Custom Exceptions ===

class ChunkingError(Exception):
    """Base exception for chunking operations."""
    pass


class ChunkingConfigurationError(ChunkingError):
    """Invalid chunking configuration."""
    pass


class TokenCountError(ChunkingError):
    """Token counter returned something other than a non-negative integer."""
    pass


class StatisticsCalculationError(ChunkingError):
    """Error computing statistics."""
    pass


# === Separator Level ===

@dataclass(frozen=True)
class SeparatorLevel:
    """
    One entry of the separator hierarchy.

    A level with ``pattern=None`` splits between any two characters. When
    ``longest_only`` is set, only the longest matches inside a span are used
    as split points (a blank line beats a single line break).
    """

    name: str
    pattern: Optional[re.Pattern] = None
    retention: RetentionPolicy = RetentionPolicy.DROP
    longest_only: bool = False

    def __post_init__(self):
        """Validate level attributes."""
        if not self.name:
            raise ChunkingConfigurationError("separator level needs a name")

        if self.pattern is not None:
            if isinstance(self.pattern, str):
                # Frozen dataclass: compile through object.__setattr__
                object.__setattr__(self, "pattern", re.compile(self.pattern))
            if self.pattern.search("") is not None:
                raise ChunkingConfigurationError(
                    f"separator level '{self.name}' matches the empty string"
                )

        if not isinstance(self.retention, RetentionPolicy):
            raise ChunkingConfigurationError(
                f"separator level '{self.name}' has invalid retention {self.retention!r}"
            )

    @property
    def is_character_level(self) -> bool:
        """True for the fallback level that splits between characters."""
        return self.pattern is None


# === Span ===

@dataclass(frozen=True, order=True)
class Span:
    """Half-open ``[start, end)`` region of the source text."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def midpoint(self) -> float:
        """Textual midpoint of the span."""
        return (self.start + self.end) / 2

    def text(self, source: str) -> str:
        """Materialize the span from its source text."""
        return source[self.start:self.end]


# === Chunk ===

@dataclass(frozen=True)
class Chunk:
    """
    A finished chunk.

    ``separator`` holds the source text between this chunk and the next one
    (whatever a dropping separator level removed), so that
    ``"".join(c.text + c.separator for c in chunks)`` rebuilds the input.
    """

    text: str
    token_count: int
    start: int
    end: int
    separator: str = ""

    def __post_init__(self):
        """Ensure offsets agree with the materialized text."""
        if self.end - self.start != len(self.text):
            raise ValueError(
                f"chunk offsets [{self.start}, {self.end}) do not match text of length {len(self.text)}"
            )

    @property
    def character_count(self) -> int:
        return len(self.text)

    def is_oversized(self, max_tokens: int) -> bool:
        """Check if the chunk exceeds the budget (an unsplittable unit)."""
        return self.token_count > max_tokens

    def utilization(self, max_tokens: int) -> float:
        """Fraction of the budget this chunk uses."""
        return self.token_count / max_tokens if max_tokens else 0.0


# === Chunk Statistics ===

@dataclass
class ChunkStatistics:
    """Aggregated metrics about chunking results."""

    total_chunks: int = 0
    total_tokens: int = 0
    total_characters: int = 0
    min_tokens: int = 0
    max_tokens: int = 0
    average_tokens: float = 0.0
    median_tokens: float = 0.0
    standard_deviation: float = 0.0
    oversized_count: int = 0
    average_utilization: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_chunks": self.total_chunks,
            "total_tokens": self.total_tokens,
            "total_characters": self.total_characters,
            "min_tokens": self.min_tokens,
            "max_tokens": self.max_tokens,
            "average_tokens": round(self.average_tokens, 2),
            "median_tokens": round(self.median_tokens, 2),
            "standard_deviation": round(self.standard_deviation, 2),
            "oversized_count": self.oversized_count,
            "average_utilization": round(self.average_utilization, 4),
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
        }

    def summary(self) -> str:
        """Human-readable summary string."""
        return (
            f"Chunks: {self.total_chunks}, "
            f"Avg Size: {self.average_tokens:.1f} tokens, "
            f"Budget Use: {self.average_utilization * 100:.1f}%, "
            f"Oversized: {self.oversized_count}, "
            f"Std Dev: {self.standard_deviation:.1f}"
        )
