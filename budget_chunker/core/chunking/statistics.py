"""
Statistics calculation for chunk analysis.

Provides metrics for evaluating how well chunks use the token budget.
"""

import statistics as stats_module
from typing import List

from .models import Chunk, ChunkStatistics, StatisticsCalculationError


def calculate_chunk_statistics(chunks: List[Chunk], max_tokens: int) -> ChunkStatistics:
    """
    Generate aggregate statistics for chunk size analysis.

    Args:
        chunks: List of chunks from a chunking call
        max_tokens: Budget the chunks were produced for

    Returns:
        ChunkStatistics object with all metrics calculated
    """
    if not chunks:
        return ChunkStatistics()

    try:
        sizes = [chunk.token_count for chunk in chunks]
        total_chunks = len(sizes)

        if total_chunks > 1:
            median_tokens = stats_module.median(sizes)
            standard_deviation = stats_module.stdev(sizes)
        else:
            median_tokens = sizes[0]
            standard_deviation = 0.0

        oversized_count = sum(1 for chunk in chunks if chunk.is_oversized(max_tokens))
        average_utilization = stats_module.mean(chunk.utilization(max_tokens) for chunk in chunks)

        return ChunkStatistics(
            total_chunks=total_chunks,
            total_tokens=sum(sizes),
            total_characters=sum(chunk.character_count for chunk in chunks),
            min_tokens=min(sizes),
            max_tokens=max(sizes),
            average_tokens=stats_module.mean(sizes),
            median_tokens=median_tokens,
            standard_deviation=standard_deviation,
            oversized_count=oversized_count,
            average_utilization=average_utilization,
        )

    except Exception as e:
        raise StatisticsCalculationError(f"Error computing statistics: {str(e)}")
