"""Matching package: candidate store, scoring, ranking and de-duplication.

The orchestrator lives in :mod:`aidmatch.match.orchestrator` and is not
re-exported here because it pulls in the source and parser modules.
"""

from .pool import CandidateRecord, ResponsePool
from .ranking import RankedIndex, rank_key
from .scoring import (
    ScoringConfig,
    ScoreBreakdown,
    evaluate_candidate,
    rank_candidates,
)
from .dedup import deduplicate, is_duplicate

__all__ = [
    "CandidateRecord",
    "ResponsePool",
    "RankedIndex",
    "rank_key",
    "ScoringConfig",
    "ScoreBreakdown",
    "evaluate_candidate",
    "rank_candidates",
    "deduplicate",
    "is_duplicate",
]
