"""
Token counter adapters.

A token counter is any callable mapping a string to a non-negative int.
This module provides a few ready-made ones: a whitespace word counter, a
tiktoken encoder, and a wrapper for any tokenizer exposing ``encode()``.
"""

import logging
from typing import Any, Optional

import tiktoken

from budget_chunker.core.chunking.models import ChunkingConfigurationError

logger = logging.getLogger(__name__)


def word_counter(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


class TiktokenCounter:
    """
    Counts tokens with a tiktoken encoding.

    Special-token markers such as ``<|endoftext|>`` are counted as ordinary
    text instead of raising, since chunked input is arbitrary.
    """

    def __init__(self, encoding_name: str = "cl100k_base", model: Optional[str] = None):
        """
        Initialize the counter.

        Args:
            encoding_name: tiktoken encoding to load (ignored if model is set)
            model: Model name to resolve the encoding from, e.g. "gpt-4o"
        """
        if model:
            self.encoder = tiktoken.encoding_for_model(model)
        else:
            self.encoder = tiktoken.get_encoding(encoding_name)
        self.encoding_name = self.encoder.name
        logger.debug(f"Loaded tiktoken encoding '{self.encoding_name}'")

    def __call__(self, text: str) -> int:
        if not text:
            return 0
        return len(self.encoder.encode(text, disallowed_special=()))

    def __repr__(self) -> str:
        return f"TiktokenCounter(encoding_name={self.encoding_name!r})"


class EncoderCounter:
    """
    Wraps any tokenizer with an ``encode(text)`` method.

    Works with Hugging Face ``tokenizers.Tokenizer`` (whose encodings carry
    ``.ids``) and ``transformers`` tokenizers (which return id lists). Extra
    keyword arguments go to ``encode``, e.g. ``add_special_tokens=False``.
    """

    def __init__(self, tokenizer: Any, **encode_kwargs):
        if not callable(getattr(tokenizer, "encode", None)):
            raise ChunkingConfigurationError(
                f"{type(tokenizer).__name__} has no encode() method"
            )
        self.tokenizer = tokenizer
        self.encode_kwargs = encode_kwargs

    def __call__(self, text: str) -> int:
        if not text:
            return 0
        encoded = self.tokenizer.encode(text, **self.encode_kwargs)
        ids = getattr(encoded, "ids", encoded)
        return len(ids)


def get_token_counter(name: str, **kwargs):
    """
    Build a token counter by name.

    Args:
        name: "words" or "tiktoken"
        **kwargs: Passed to the counter constructor (tiktoken only)

    Returns:
        A callable token counter
    """
    if name == "words":
        return word_counter
    if name == "tiktoken":
        return TiktokenCounter(**kwargs)
    raise ChunkingConfigurationError(f"Unknown token counter: {name}")
