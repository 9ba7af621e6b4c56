"""Ordered index of candidate numbers keyed by a synthetic sort key."""

from __future__ import annotations
import bisect
from typing import Iterator, List, Tuple


def rank_key(score: float) -> int:
    """Sort key for a score: ascending key order is descending score order."""
    return 1000 - int(round(score * 10.0))


class RankedIndex:
    """Sort key -> candidate index, ties kept in insertion order."""

    def __init__(self) -> None:
        self._entries: List[Tuple[int, int, int]] = []
        self._seq = 0
        self._iter_pos = 0

    def insert(self, sort_key: int, candidate_index: int) -> None:
        bisect.insort(self._entries, (sort_key, self._seq, candidate_index))
        self._seq += 1

    def add_score(self, score: float, candidate_index: int) -> None:
        self.insert(rank_key(score), candidate_index)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return (idx for _, _, idx in self._entries)

    def items(self) -> List[Tuple[int, int]]:
        return [(key, idx) for key, _, idx in self._entries]

    def start_iteration(self) -> None:
        self._iter_pos = 0

    def next(self) -> int | None:
        """Next candidate index of an explicit iteration, None when exhausted."""
        if self._iter_pos >= len(self._entries):
            return None
        idx = self._entries[self._iter_pos][2]
        self._iter_pos += 1
        return idx


__all__ = ["RankedIndex", "rank_key"]
