"""Summaries of how chunk token counts are distributed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

_BUCKETS = (
    (50, "1-50"),
    (100, "51-100"),
    (200, "101-200"),
    (300, "201-300"),
    (400, "301-400"),
    (500, "401-500"),
    (512, "501-512"),
)
_OVERFLOW = "513+"
_PERCENTILES = (20, 40, 60, 80)


def _bucket(tokens: int) -> str:
    return next((label for limit, label in _BUCKETS if tokens <= limit), _OVERFLOW)


@dataclass
class DistributionReport:
    """Statistics over a set of chunk token counts."""

    total_chunks: int = 0
    smallest: int = 0
    largest: int = 0
    average: int = 0
    quintiles: dict[int, int] = field(default_factory=dict)
    distribution: dict[str, int] = field(default_factory=dict)
    below_minimum: int = 0
    threshold: int = 150

    def format(self) -> str:
        """Render the report as human-readable text."""
        if not self.total_chunks:
            return "\nNo chunks created\n"
        out = [
            "\n=== Final Chunk Distribution Analysis ===\n",
            f"Total chunks: {self.total_chunks}\n",
            f"Min tokens: {self.smallest}\n",
            f"Max tokens: {self.largest}\n",
            f"Average tokens: {self.average}\n",
            "\nQuintiles:\n",
        ]
        out.extend(
            f"  {p}th percentile: {value} tokens\n" for p, value in self.quintiles.items()
        )
        out.append("\nToken Range Distribution:\n")
        for label, count in self.distribution.items():
            percentage = count * 100.0 / self.total_chunks
            out.append(f"  {label} tokens: {count} chunks ({percentage:.1f}%)\n")
        if self.below_minimum:
            out.append(
                f"\nWARNING: {self.below_minimum} chunks are below the minimum "
                f"threshold of {self.threshold} tokens\n"
            )
        else:
            out.append(
                f"\nSUCCESS: All chunks meet the minimum threshold of {self.threshold} tokens\n"
            )
        return "".join(out)


def analyze_chunk_distribution(
    token_counts: Iterable[int], min_tokens: int = 150
) -> DistributionReport:
    """Summarise chunk sizes; ``min_tokens`` is the threshold for small chunks."""
    counts = sorted(token_counts)
    if not counts:
        return DistributionReport(threshold=min_tokens)

    last = len(counts) - 1
    quintiles = {p: counts[last * p // 100] for p in _PERCENTILES}

    tally: dict[str, int] = {}
    for tokens in counts:
        label = _bucket(tokens)
        tally[label] = tally.get(label, 0) + 1

    return DistributionReport(
        total_chunks=len(counts),
        smallest=counts[0],
        largest=counts[-1],
        average=int(sum(counts) / len(counts)),
        quintiles=quintiles,
        distribution=dict(sorted(tally.items())),
        below_minimum=sum(1 for tokens in counts if tokens < min_tokens),
        threshold=min_tokens,
    )