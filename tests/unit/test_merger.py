"""
Unit tests for greedy span merging.
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from budget_chunker.core.chunking.merger import merge_spans
from budget_chunker.core.chunking.models import Span
from budget_chunker.core.chunking.token_cache import TokenCountCache


class TestMergeSpans:
    """Tests for merge_spans."""

    def test_empty(self, word_count):
        assert merge_spans([], 5, TokenCountCache("", word_count)) == []

    def test_single_span_unchanged(self, word_count):
        text = "one two"
        assert merge_spans([Span(0, 7)], 5, TokenCountCache(text, word_count)) == [Span(0, 7)]

    def test_three_short_sentences(self, word_count):
        """First two 2-token sentences merge; the third would exceed the budget."""
        text = "Aa bb. Cc dd. Ee ff."
        spans = [Span(0, 6), Span(7, 13), Span(14, 20)]
        merged = merge_spans(spans, 5, TokenCountCache(text, word_count))
        assert merged == [Span(0, 13), Span(14, 20)]
        assert merged[0].text(text) == "Aa bb. Cc dd."

    def test_merge_includes_dropped_separator(self, word_count):
        """Joined spans cover the separator text between them."""
        text = "alpha\n\nbeta"
        merged = merge_spans([Span(0, 5), Span(7, 11)], 4, TokenCountCache(text, word_count))
        assert merged == [Span(0, 11)]

    def test_greedy_never_revisits(self, word_count):
        """Once emitted, an accumulator is never merged again."""
        text = "a b c\nd\ne f g"
        spans = [Span(0, 5), Span(6, 7), Span(8, 13)]
        merged = merge_spans(spans, 4, TokenCountCache(text, word_count))
        # 3 + 1 fits, then 1 + 3 would also fit but "d" is already taken
        assert [s.text(text) for s in merged] == ["a b c\nd", "e f g"]

    def test_joined_count_checked(self):
        """Pieces whose sum fits but whose joined span does not stay apart."""
        def counter(s):
            return len(s.split()) + 5 * s.count("|")

        text = "a|b"
        merged = merge_spans([Span(0, 1), Span(2, 3)], 3, TokenCountCache(text, counter))
        assert merged == [Span(0, 1), Span(2, 3)]

    def test_oversized_pieces_left_alone(self):
        """Pieces already over budget never merge."""
        text = "ab"
        merged = merge_spans([Span(0, 1), Span(1, 2)], 3, TokenCountCache(text, lambda s: 5 * len(s)))
        assert merged == [Span(0, 1), Span(1, 2)]
