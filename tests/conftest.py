"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and configuration for all test modules.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest


def count_words(text):
    """Whitespace word counter used throughout the tests."""
    return len(text.split())


class RecordingCounter:
    """Token counter that records every string it is asked to count."""

    def __init__(self, counter=count_words):
        self.counter = counter
        self.calls = []

    def __call__(self, text):
        self.calls.append(text)
        return self.counter(text)


@pytest.fixture
def word_count():
    """Plain whitespace word counter."""
    return count_words


@pytest.fixture
def recording_counter():
    """Word counter that records its calls."""
    return RecordingCounter()


@pytest.fixture
def fox_text():
    """Classic pangram used for the reference chunking scenario."""
    return "The quick brown fox jumps over the lazy dog."


@pytest.fixture
def mixed_text():
    """Text exercising every separator level."""
    return (
        "Chapter One\r\n\r\n"
        "It was a bright cold day in April, and the clocks were striking thirteen. "
        "Winston Smith, his chin nuzzled into his breast; slipped quickly through the glass doors.\n"
        "\tThe hallway smelt of boiled cabbage (and old rag mats) - at one end of it a coloured poster...\n\n"
        "  Indented line with trailing spaces   \n"
        "URL: https://example.com/path/to/page?x=1&y=2 and/or a long-hyphenated-compound-word!\n"
        "Unicode — “quoted” ‘text’ … naïve café.\n"
        "Supercalifragilisticexpialidocious"
    )


@pytest.fixture
def tiktoken_counter():
    """tiktoken-backed counter; skipped when the encoding cannot be loaded."""
    pytest.importorskip("tiktoken")
    from budget_chunker.core.counters import TiktokenCounter
    try:
        return TiktokenCounter("cl100k_base")
    except Exception as e:
        pytest.skip(f"tiktoken encoding unavailable: {e}")
