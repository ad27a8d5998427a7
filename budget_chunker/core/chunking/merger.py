"""
Greedy merging of adjacent pieces.

A single left-to-right pass that folds each piece into the running
accumulator while the joined span still fits the token budget. Pieces are
joined through the source text, so separators dropped between them come
back when they merge.
"""

import logging
from typing import List

from .models import Span
from .token_cache import TokenCountCache

logger = logging.getLogger(__name__)


def merge_spans(spans: List[Span], max_tokens: int, cache: TokenCountCache) -> List[Span]:
    """
    Coalesce adjacent spans whose combined token count fits the budget.

    A piece joins the accumulator when the sum of both counts fits and the
    joined source span, separator included, fits as well.

    Args:
        spans: Ordered, non-overlapping spans from the splitter
        max_tokens: Token budget per chunk
        cache: Token count cache bound to the source text

    Returns:
        Ordered spans, same or fewer than the input.
    """
    if not spans:
        return []

    merged: List[Span] = []
    accumulator = spans[0]
    accumulator_tokens = cache.count_span(accumulator)

    for piece in spans[1:]:
        piece_tokens = cache.count_span(piece)

        if accumulator_tokens + piece_tokens <= max_tokens:
            joined_tokens = cache.count(accumulator.start, piece.end)
            if joined_tokens <= max_tokens:
                accumulator = Span(accumulator.start, piece.end)
                accumulator_tokens = joined_tokens
                continue

        merged.append(accumulator)
        accumulator = piece
        accumulator_tokens = piece_tokens

    merged.append(accumulator)

    if len(merged) < len(spans):
        logger.debug("Merged %d pieces into %d chunks", len(spans), len(merged))

    return merged
