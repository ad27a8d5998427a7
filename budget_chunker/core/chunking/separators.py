"""
Separator hierarchy and split-point search.

The hierarchy is an ordered table of SeparatorLevel entries, coarsest first.
Whitespace boundaries (line breaks, tabs, sentence and clause ends, words)
are tried before punctuation inside a whitespace-free run, and the last
level cuts between characters.
"""

import re
from collections.abc import Sequence
from typing import List, NamedTuple, Optional, Tuple

from .models import ChunkingConfigurationError, RetentionPolicy, SeparatorLevel, Span


class SplitPoint(NamedTuple):
    """Where the left piece ends and the right piece starts."""
    left_end: int
    right_start: int


# Regex patterns
LINE_BREAK_PATTERN = re.compile(r'[\r\n]+')
TAB_PATTERN = re.compile(r'\t+')
SENTENCE_END_PATTERN = re.compile(r'(?:(?<=[.?!…])|(?<=[.?!…]["\'”’)\]]))\s+')
CLAUSE_END_PATTERN = re.compile(r'(?<=[;,:—–])\s+')
WHITESPACE_PATTERN = re.compile(r'\s+')
SENTENCE_PUNCTUATION_PATTERN = re.compile(r'[.?!*]+')
CLOSING_PUNCTUATION_PATTERN = re.compile(r'[;,)\]”’\'"`]+')
OPENING_PUNCTUATION_PATTERN = re.compile(r'[(\[“‘]+')
INTERRUPTER_PATTERN = re.compile(r'[:—…]+')
WORD_JOINER_PATTERN = re.compile(r'[/\\–&-]+')


DEFAULT_SEPARATORS: Tuple[SeparatorLevel, ...] = (
    SeparatorLevel("line_breaks", LINE_BREAK_PATTERN, RetentionPolicy.DROP, longest_only=True),
    SeparatorLevel("tabs", TAB_PATTERN, RetentionPolicy.DROP, longest_only=True),
    SeparatorLevel("sentence_ends", SENTENCE_END_PATTERN, RetentionPolicy.DROP),
    SeparatorLevel("clause_ends", CLAUSE_END_PATTERN, RetentionPolicy.DROP),
    SeparatorLevel("words", WHITESPACE_PATTERN, RetentionPolicy.DROP),
    SeparatorLevel("sentence_punctuation", SENTENCE_PUNCTUATION_PATTERN, RetentionPolicy.ATTACH_TO_PRECEDING),
    SeparatorLevel("closing_punctuation", CLOSING_PUNCTUATION_PATTERN, RetentionPolicy.ATTACH_TO_PRECEDING),
    SeparatorLevel("opening_punctuation", OPENING_PUNCTUATION_PATTERN, RetentionPolicy.ATTACH_TO_FOLLOWING),
    SeparatorLevel("interrupters", INTERRUPTER_PATTERN, RetentionPolicy.ATTACH_TO_PRECEDING),
    SeparatorLevel("word_joiners", WORD_JOINER_PATTERN, RetentionPolicy.ATTACH_TO_PRECEDING),
    SeparatorLevel("characters"),
)


class CharacterSplitPoints(Sequence):
    """Every offset strictly inside a span, without building a list."""

    def __init__(self, span: Span):
        self._first = span.start + 1
        self._count = max(len(span) - 1, 0)

    def __len__(self) -> int:
        return self._count

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._count))]
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("split point index out of range")
        offset = self._first + index
        return SplitPoint(offset, offset)


def validate_separators(levels) -> Tuple[SeparatorLevel, ...]:
    """
    Check a separator table and return it as a tuple.

    Raises:
        ChunkingConfigurationError: if the table is empty or holds anything
            other than SeparatorLevel entries.
    """
    levels = tuple(levels)
    if not levels:
        raise ChunkingConfigurationError("separator hierarchy must contain at least one level")

    for level in levels:
        if not isinstance(level, SeparatorLevel):
            raise ChunkingConfigurationError(
                f"separator hierarchy entries must be SeparatorLevel, got {type(level).__name__}"
            )

    names = [level.name for level in levels]
    if len(set(names)) != len(names):
        raise ChunkingConfigurationError(f"duplicate separator level names: {names}")

    return levels


def _to_split_point(span: Span, start: int, end: int, retention: RetentionPolicy) -> Optional[SplitPoint]:
    """Apply a retention policy to one separator match; None if a piece would be empty."""
    if retention is RetentionPolicy.DROP:
        point = SplitPoint(start, end)
    elif retention is RetentionPolicy.ATTACH_TO_PRECEDING:
        point = SplitPoint(end, end)
    else:
        point = SplitPoint(start, start)

    if point.left_end <= span.start or point.right_start >= span.end:
        return None
    return point


def find_split_points(text: str, span: Span, level: SeparatorLevel) -> Sequence:
    """
    List the split points a level offers inside a span, in ascending order.

    Args:
        text: Full source text
        span: Region to search
        level: Separator level to apply

    Returns:
        Sequence of SplitPoint; empty when the level cannot split the span
        into two non-empty pieces.
    """
    if level.is_character_level:
        return CharacterSplitPoints(span)

    matches: List[Tuple[int, int]] = []
    for match in level.pattern.finditer(text, span.start, span.end):
        if match.end() > match.start():
            matches.append((match.start(), match.end()))

    points: List[Tuple[int, SplitPoint]] = []
    for start, end in matches:
        point = _to_split_point(span, start, end, level.retention)
        if point is not None:
            points.append((end - start, point))

    if level.longest_only and points:
        longest = max(length for length, _ in points)
        return [point for length, point in points if length == longest]

    return [point for _, point in points]


def select_split_points(text: str, span: Span, levels) -> Tuple[Optional[SeparatorLevel], Sequence]:
    """
    Find the coarsest level that can split the span.

    Returns:
        Tuple of (level, split points). The level is None when no level
        applies and the points are the hard character-offset fallback.
    """
    for level in levels:
        points = find_split_points(text, span, level)
        if len(points) > 0:
            return level, points

    return None, CharacterSplitPoints(span)
