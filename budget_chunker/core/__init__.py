"""
Core chunking modules
"""
from .chunking import Chunker, reconstruct
from .counters import get_token_counter

__all__ = [
    'Chunker',
    'reconstruct',
    'get_token_counter',
]
