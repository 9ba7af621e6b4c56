"""Collapse score-adjacent duplicate candidates.

Only neighbours in ranked order are compared: a candidate is dropped when it
agrees with the last retained candidate on every duplicate-check key that is
filled in on both sides. Identical candidates separated by a differing one
are both kept.
"""

from __future__ import annotations
import logging
from typing import Iterable

from ..tags import DUPLICATE_CHECK_KEYS, AttributeKey
from .pool import CandidateRecord, ResponsePool
from .ranking import RankedIndex

logger = logging.getLogger(__name__)


def is_duplicate(a: CandidateRecord, b: CandidateRecord,
                 keys: Iterable[AttributeKey] = DUPLICATE_CHECK_KEYS) -> bool:
    for key in keys:
        left = a.text(key)
        right = b.text(key)
        if left is None or right is None:
            continue
        if left != right:
            return False
    return True


def deduplicate(pool: ResponsePool, ranked: RankedIndex) -> RankedIndex:
    """Return a new ranked index without adjacent duplicates."""
    result = RankedIndex()
    previous: CandidateRecord | None = None
    dropped = 0
    for sort_key, index in ranked.items():
        record = pool.get(index)
        if record is None:
            continue
        if previous is not None and is_duplicate(previous, record):
            logger.debug(f"dedup: candidate {index} duplicates {previous.get(AttributeKey.RESPIDX)}")
            dropped += 1
            continue
        result.insert(sort_key, index)
        previous = record
    if dropped:
        logger.info(f"dedup: removed {dropped} duplicate candidates")
    return result


__all__ = ["is_duplicate", "deduplicate"]
