"""
Unit tests for the separator hierarchy and split-point search.
"""
import re
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from budget_chunker.core.chunking.models import (
    ChunkingConfigurationError,
    RetentionPolicy,
    SeparatorLevel,
    Span,
)
from budget_chunker.core.chunking.separators import (
    DEFAULT_SEPARATORS,
    CharacterSplitPoints,
    SplitPoint,
    find_split_points,
    select_split_points,
    validate_separators,
)


def _level(name):
    return next(level for level in DEFAULT_SEPARATORS if level.name == name)


def _pieces(text, point):
    return text[:point.left_end], text[point.left_end:point.right_start], text[point.right_start:]


class TestDefaultHierarchy:
    """Tests for the default separator table."""

    def test_ordered_coarsest_to_finest(self):
        """Line breaks come first and the character level last."""
        names = [level.name for level in DEFAULT_SEPARATORS]
        assert names[0] == "line_breaks"
        assert names.index("sentence_ends") < names.index("words")
        assert names.index("words") < names.index("sentence_punctuation")
        assert names[-1] == "characters"
        assert DEFAULT_SEPARATORS[-1].is_character_level

    def test_whitespace_levels_drop_separator(self):
        """Whitespace separators are dropped from both pieces."""
        for name in ("line_breaks", "tabs", "sentence_ends", "clause_ends", "words"):
            assert _level(name).retention is RetentionPolicy.DROP

    def test_punctuation_levels_keep_separator(self):
        """Punctuation stays attached to one of the pieces."""
        assert _level("sentence_punctuation").retention is RetentionPolicy.ATTACH_TO_PRECEDING
        assert _level("opening_punctuation").retention is RetentionPolicy.ATTACH_TO_FOLLOWING


class TestSelectSplitPoints:
    """Tests for picking the coarsest applicable level."""

    def test_newline_preferred_over_space(self):
        """A line break beats the spaces inside each line."""
        text = "Hello World\nGoodbye World"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "line_breaks"
        assert list(points) == [SplitPoint(11, 12)]

    def test_longest_line_break_run_wins(self):
        """A blank line is preferred over a single newline."""
        text = "Hello, World!\n\nGoodbye, World!\n<EOF>"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "line_breaks"
        assert len(points) == 1
        left, separator, right = _pieces(text, points[0])
        assert left == "Hello, World!"
        assert separator == "\n\n"
        assert right == "Goodbye, World!\n<EOF>"

    def test_tab_preferred_over_space(self):
        """Tabs split before plain spaces."""
        text = "Hello, World!\tGoodbye, World!"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "tabs"
        assert list(points) == [SplitPoint(13, 14)]

    def test_sentence_end_preferred_over_words(self):
        """Whitespace after a terminator is a sentence boundary."""
        text = "Hi there. Bye now."
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "sentence_ends"
        assert list(points) == [SplitPoint(9, 10)]

    def test_sentence_end_after_closing_quote(self):
        """A terminator followed by a closing quote still ends a sentence."""
        text = 'He said "stop." Then left.'
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "sentence_ends"
        assert _pieces(text, points[0])[0] == 'He said "stop."'

    def test_clause_end(self):
        """Whitespace after a comma is used before plain word gaps."""
        text = "one two, three four"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "clause_ends"
        assert _pieces(text, points[0])[0] == "one two,"

    def test_words(self):
        """Plain spaces split words."""
        text = "alpha beta gamma"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "words"
        assert list(points) == [SplitPoint(5, 6), SplitPoint(10, 11)]

    def test_punctuation_without_whitespace(self):
        """A trailing '!' cannot split, so the comma level is used."""
        text = "Hello,World!"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "closing_punctuation"
        assert list(points) == [SplitPoint(6, 6)]
        assert _pieces(text, points[0]) == ("Hello,", "", "World!")

    def test_opening_bracket_attaches_to_following(self):
        """An opening bracket starts the right piece."""
        text = "foo(bar)"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "opening_punctuation"
        assert _pieces(text, points[0]) == ("foo", "", "(bar)")

    def test_character_level_when_nothing_matches(self):
        """Text without separators falls through to character offsets."""
        text = "Hello_World"
        level, points = select_split_points(text, Span(0, len(text)), DEFAULT_SEPARATORS)
        assert level.name == "characters"
        assert len(points) == len(text) - 1

    def test_hard_fallback_without_character_level(self):
        """A table with no applicable level returns offset split points."""
        levels = (SeparatorLevel("commas", re.compile(","), RetentionPolicy.ATTACH_TO_PRECEDING),)
        level, points = select_split_points("abcd", Span(0, 4), levels)
        assert level is None
        assert [p.left_end for p in points] == [1, 2, 3]

    def test_respects_span_bounds(self):
        """Only separators inside the span are considered."""
        text = "aa bb\ncc dd"
        level, points = select_split_points(text, Span(6, 11), DEFAULT_SEPARATORS)
        assert level.name == "words"
        assert list(points) == [SplitPoint(8, 9)]


class TestFindSplitPoints:
    """Tests for a single level's split points."""

    def test_separator_at_span_edges_ignored(self):
        """Leading or trailing separators would leave an empty piece."""
        text = " hello "
        assert find_split_points(text, Span(0, len(text)), _level("words")) == []

    def test_attach_to_preceding_at_end_ignored(self):
        """A terminator at the very end cannot split."""
        text = "Hello!"
        assert find_split_points(text, Span(0, len(text)), _level("sentence_punctuation")) == []

    def test_longest_only_filters_shorter_runs(self):
        """Only the longest line-break runs are split points."""
        text = "a\n\nb\nc\n\nd"
        points = find_split_points(text, Span(0, len(text)), _level("line_breaks"))
        assert points == [SplitPoint(1, 3), SplitPoint(6, 8)]

    def test_crlf_is_one_separator(self):
        """Windows line endings are treated as a single break."""
        text = "a\r\nb"
        points = find_split_points(text, Span(0, len(text)), _level("line_breaks"))
        assert points == [SplitPoint(1, 3)]


class TestCharacterSplitPoints:
    """Tests for the lazy character offset sequence."""

    def test_length_and_items(self):
        points = CharacterSplitPoints(Span(10, 14))
        assert len(points) == 3
        assert points[0] == SplitPoint(11, 11)
        assert points[-1] == SplitPoint(13, 13)
        assert points[0:2] == [SplitPoint(11, 11), SplitPoint(12, 12)]

    def test_single_character_has_no_points(self):
        assert len(CharacterSplitPoints(Span(3, 4))) == 0

    def test_out_of_range(self):
        with pytest.raises(IndexError):
            CharacterSplitPoints(Span(0, 3))[2]


class TestSeparatorValidation:
    """Tests for separator table validation."""

    def test_empty_table_rejected(self):
        with pytest.raises(ChunkingConfigurationError):
            validate_separators([])

    def test_wrong_entry_type_rejected(self):
        with pytest.raises(ChunkingConfigurationError):
            validate_separators(["\n\n"])

    def test_duplicate_names_rejected(self):
        level = SeparatorLevel("words", re.compile(r"\s+"))
        with pytest.raises(ChunkingConfigurationError):
            validate_separators([level, level])

    def test_string_pattern_compiled(self):
        """String patterns are compiled on construction."""
        level = SeparatorLevel("pipes", r"\|")
        assert isinstance(level.pattern, re.Pattern)

    def test_empty_matching_pattern_rejected(self):
        """A pattern that matches the empty string could never make progress."""
        with pytest.raises(ChunkingConfigurationError):
            SeparatorLevel("spaces", r"\s*")

    def test_name_required(self):
        with pytest.raises(ChunkingConfigurationError):
            SeparatorLevel("")
