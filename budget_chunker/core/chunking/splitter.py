"""
Recursive splitting of a span into budget-fitting pieces.

Each oversized span is cut in two at the coarsest separator level that can
split it, and both halves are processed again until every piece fits the
token budget. Pending spans are kept in an explicit frontier instead of the
call stack, so arbitrarily long unsplittable runs never hit the
interpreter's recursion limit.

Split point selection searches the level's candidates, relying on token
counts being non-decreasing for growing prefixes of the same text:

    target = min(max_tokens, ceil(count(span) / 2))

A span that fits into two chunks is therefore halved, while a longer span
has budget-sized pieces carved off its front. The search gallops from the
front of the span before bisecting, so the text sent to the counter per
split stays proportional to the piece being cut rather than to the span.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .models import ChunkingConfigurationError, Span
from .separators import DEFAULT_SEPARATORS, select_split_points, validate_separators
from .token_cache import TokenCountCache

logger = logging.getLogger(__name__)


class RecursiveSplitter:
    """Splits text into spans whose token counts fit a budget."""

    def __init__(self, max_tokens: int, separators=DEFAULT_SEPARATORS):
        """
        Initialize the splitter.

        Args:
            max_tokens: Token budget per piece (positive integer)
            separators: Ordered separator hierarchy, coarsest first
        """
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
            raise ChunkingConfigurationError(
                f"max_tokens must be a positive integer, got {max_tokens!r}"
            )
        self.max_tokens = max_tokens
        self.separators = validate_separators(separators)

    def split(
        self,
        text: str,
        cache: TokenCountCache,
        span: Optional[Span] = None,
        map_func: Callable = map
    ) -> List[Span]:
        """
        Split a span of ``text`` into ordered, budget-fitting spans.

        Args:
            text: Full source text
            cache: Token count cache bound to ``text``
            span: Region to split (defaults to the whole text)
            map_func: ``map``-compatible callable used to evaluate each
                frontier, e.g. ``ThreadPoolExecutor.map``

        Returns:
            Non-empty spans in source order. A span is only over budget when
            it is a single character the counter still rates above the budget.
        """
        if span is None:
            span = Span(0, len(text))
        if len(span) == 0:
            return []

        leaves: List[Span] = []
        frontier = [span]
        while frontier:
            results = list(map_func(lambda s: self.split_once(text, s, cache), frontier))
            next_frontier: List[Span] = []
            for pending, pieces in zip(frontier, results):
                if pieces is None:
                    leaves.append(pending)
                else:
                    next_frontier.extend(pieces)
            frontier = next_frontier

        leaves.sort()
        return leaves

    def split_once(self, text: str, span: Span, cache: TokenCountCache) -> Optional[Tuple[Span, ...]]:
        """
        Decide how to split one span.

        A span of at least ``2 * max_tokens - 1`` tokens has budget-sized
        pieces carved off its front, one after another, at the same level.
        The remainder is not recounted between carves: a prefix of it
        reaching that size is enough to know another carve follows. Once the
        remainder is smaller it is returned as the last piece and halved on
        the next pass.

        Returns:
            None when the span is a finished piece, otherwise the non-empty
            pieces it splits into, in source order.
        """
        total = cache.count_span(span)
        if total <= self.max_tokens:
            return None

        if len(span) <= 1:
            logger.warning(
                f"Unsplittable span [{span.start}, {span.end}) has {total} tokens, "
                f"over the budget of {self.max_tokens}; emitting it as is"
            )
            return None

        level, points = select_split_points(text, span, self.separators)
        level_name = level.name if level is not None else "offset fallback"
        carve_threshold = max(2 * self.max_tokens - 1, self.max_tokens + 1)

        pieces: List[Span] = []
        start = span.start
        base = 0
        while True:
            remainder = Span(start, span.end)
            index = self.choose_split_index(remainder, points, total, cache, base=base)
            point = points[index]

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Split [%d, %d) at %d/%d via %s",
                    remainder.start, remainder.end, point.left_end, point.right_start, level_name,
                )

            pieces.append(Span(start, point.left_end))
            start = point.right_start
            base = index + 1
            while base < len(points) and points[base].left_end <= start:
                base += 1

            # Only another budget-sized carve keeps the loop going
            if total is not None and total < carve_threshold:
                break
            if base >= len(points) or not self._prefix_reaches(start, points, base, carve_threshold, cache):
                break
            total = None

        pieces.append(Span(start, span.end))
        return tuple(piece for piece in pieces if len(piece) > 0)

    def choose_split_index(
        self,
        span: Span,
        points: Sequence,
        total: Optional[int],
        cache: TokenCountCache,
        base: int = 0
    ) -> int:
        """
        Pick the split point for a span by galloping then bisecting.

        The chosen prefix is the one whose token count is nearest the target
        among prefixes that fit the budget; when a lighter and a heavier
        prefix are equally near, the heavier wins. Prefixes with identical
        counts are resolved toward the span's textual midpoint.

        The search probes prefixes at ``base``, ``base + 1``, ``base + 3``,
        ``base + 7`` and so on before bisecting, so the prefixes handed to the
        counter stay close in size to the one finally chosen.

        Args:
            span: Span being split
            points: Ascending split points; those before ``base`` are ignored
            total: Token count of the whole span, or None when it is only
                known to be large enough that the target is the full budget
            cache: Token count cache
            base: Index of the first split point inside ``span``

        Returns:
            Index into ``points``, at least ``base``.
        """
        if total is None:
            target = self.max_tokens
        else:
            target = min(self.max_tokens, -(-total // 2))

        def prefix_count(i: int) -> int:
            return cache.count(span.start, points[i].left_end)

        # First index whose prefix exceeds the target
        lo = _first_true(base, len(points), lambda i: prefix_count(i) > target)

        below = lo - 1
        if below < base:
            chosen = base
        else:
            chosen = below
            if lo < len(points):
                above_count = prefix_count(lo)
                below_count = prefix_count(below)
                if above_count <= self.max_tokens and above_count - target <= target - below_count:
                    chosen = lo

        return self._nearest_midpoint(span, points, chosen, prefix_count, base)

    @staticmethod
    def _prefix_reaches(start: int, points: Sequence, base: int, threshold: int, cache: TokenCountCache) -> bool:
        """Whether some prefix from ``start`` to a point at or after ``base`` holds ``threshold`` tokens."""
        probe, step = base, 1
        while probe < len(points):
            if cache.count(start, points[probe].left_end) >= threshold:
                return True
            if probe == len(points) - 1:
                break
            probe = min(probe + step, len(points) - 1)
            step *= 2
        return False

    @staticmethod
    def _nearest_midpoint(span: Span, points: Sequence, chosen: int, prefix_count, base: int = 0) -> int:
        """Among points sharing the chosen prefix count, take the one nearest the midpoint."""
        count = prefix_count(chosen)

        # Bounds of the run of equal counts around ``chosen``
        lo, hi = base, chosen
        while lo < hi:
            mid = (lo + hi) // 2
            if prefix_count(mid) < count:
                lo = mid + 1
            else:
                hi = mid
        first = lo
        last = _first_true(chosen + 1, len(points), lambda i: prefix_count(i) > count) - 1

        if first == last:
            return chosen

        midpoint = span.midpoint
        lo, hi = first, last
        while lo < hi:
            mid = (lo + hi) // 2
            if points[mid].left_end < midpoint:
                lo = mid + 1
            else:
                hi = mid

        best = lo
        if lo > first and midpoint - points[lo - 1].left_end <= points[lo].left_end - midpoint:
            best = lo - 1
        return best


def _first_true(lo: int, hi: int, predicate: Callable[[int], bool]) -> int:
    """
    First index in ``[lo, hi)`` where a monotone predicate holds, or ``hi``.

    Gallops from ``lo`` (``lo``, ``lo + 1``, ``lo + 3``, ``lo + 7``, ...) and
    bisects inside the window where the predicate turns true, so only
    indexes up to about twice the answer's distance from ``lo`` are probed.
    """
    probe, step = lo, 1
    while probe < hi:
        if predicate(probe):
            hi = probe
            break
        lo = probe + 1
        probe += step
        step *= 2

    while lo < hi:
        mid = (lo + hi) // 2
        if predicate(mid):
            hi = mid
        else:
            lo = mid + 1
    return lo
