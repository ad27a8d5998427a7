"""
Memoized token counting for a single chunking call.

Counts are keyed by the (start, end) offsets of a span rather than its
content, so large substrings are never hashed. A cache is bound to one
source text and must not outlive the call that created it.
"""

import numbers
import threading
from typing import Callable, Dict, Tuple

from .models import Span, TokenCountError

TokenCounter = Callable[[str], int]


class TokenCountCache:
    """
    Per-call cache in front of a token counter.

    Safe to share between worker threads: concurrent misses on the same span
    may both call the counter, but the first stored value wins.
    """

    def __init__(self, text: str, counter: TokenCounter):
        self.text = text
        self.counter = counter
        self._counts: Dict[Tuple[int, int], int] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key) -> bool:
        if isinstance(key, Span):
            key = (key.start, key.end)
        return key in self._counts

    def count(self, start: int, end: int) -> int:
        """
        Token count of ``text[start:end]``, computing it at most once.

        Exceptions raised by the counter propagate unchanged.

        Raises:
            TokenCountError: if the counter returns a negative or non-integer value
        """
        key = (start, end)
        cached = self._counts.get(key)
        if cached is not None:
            with self._lock:
                self.hits += 1
            return cached

        value = self.counter(self.text[start:end])
        # bool is an int subclass but never a meaningful count
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
            raise TokenCountError(
                f"token counter returned {value!r} for span [{start}, {end}); "
                f"expected a non-negative int"
            )

        with self._lock:
            self.misses += 1
            return self._counts.setdefault(key, int(value))

    def count_span(self, span: Span) -> int:
        return self.count(span.start, span.end)

    def stats(self) -> Dict[str, int]:
        """Hit/miss counters for reporting."""
        return {
            "cache_hits": self.hits,
            "cache_misses": self.misses,
            "cached_spans": len(self._counts),
        }
