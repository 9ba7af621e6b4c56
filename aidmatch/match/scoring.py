"""Candidate filter and score adjustment against the locally known song.

This module does not touch the network or the parse engine; it evaluates
records that are already in the response pool. The evaluation is pure and
returns a breakdown so the CLI and the tests can see why a candidate was
rejected or penalized.

Rules, in order:
- reject a candidate without a title
- reject a candidate without a score or below min_score
- reject a candidate whose duration is outside the tolerance window, except
  for encyclopedia lookups (the recording id is already known to match)
- subtract score_penalty per mismatching album, title, track number and
  disc number; the recognition service reports no track or disc data so the
  numeric checks are skipped for it
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..config_types import MatchingConfig
from ..models import SourceId, Song
from ..tags import AttributeKey, tag_name
from .pool import CandidateRecord, ResponsePool
from .ranking import RankedIndex

logger = logging.getLogger(__name__)

K = AttributeKey

# --- Configuration ----------------------------------------------------------

@dataclass
class ScoringConfig:
    """Thresholds and penalties for candidate evaluation.

    The duration tolerance exceeds one second because fingerprint services
    round durations to the nearest second. None of these values has a
    documented derivation; treat them as tunables.
    """
    min_score: float = 85.0
    duration_tolerance_ms: int = 2000
    score_penalty: float = 1.0

    @classmethod
    def from_matching(cls, matching: MatchingConfig) -> ScoringConfig:
        return cls(
            min_score=matching.min_score,
            duration_tolerance_ms=matching.duration_tolerance_ms,
            score_penalty=matching.score_penalty,
        )


# Sources whose candidates skip the duration window.
DURATION_EXEMPT = frozenset({SourceId.MUSICBRAINZ})

# Sources that report no track or disc numbers.
NO_TRACK_DATA = frozenset({SourceId.ACRCLOUD})

# --- Result -----------------------------------------------------------------

@dataclass
class ScoreBreakdown:
    index: int
    accepted: bool
    raw_score: Optional[float]
    score: Optional[float]
    duration_diff: Optional[int] = None
    notes: List[str] = field(default_factory=list)

# --- Comparisons ------------------------------------------------------------

def _as_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _str_mismatch(record: CandidateRecord, song: Song, key: AttributeKey) -> bool:
    theirs = record.text(key)
    ours = song.get(key)
    if theirs is None or ours is None or ours == "":
        return False
    return theirs != str(ours)


def _num_mismatch(record: CandidateRecord, song: Song, key: AttributeKey) -> bool:
    theirs = _as_int(record.get(key))
    ours = _as_int(song.get(key))
    if theirs is None or ours is None:
        return False
    return theirs != ours

# --- Core evaluation --------------------------------------------------------

def evaluate_candidate(index: int, record: CandidateRecord, song: Song,
                       cfg: ScoringConfig) -> ScoreBreakdown:
    """Filter one candidate and compute its adjusted score."""
    raw_score = record.number(K.AUDIOID_SCORE)
    breakdown = ScoreBreakdown(index=index, accepted=False, raw_score=raw_score, score=None)
    notes = breakdown.notes

    if record.is_empty(K.TITLE):
        notes.append("reject_no_title")
        return breakdown

    if raw_score is None:
        notes.append("reject_no_score")
        return breakdown
    if raw_score < cfg.min_score:
        notes.append(f"reject_score:{raw_score:g}")
        return breakdown

    try:
        source: Optional[SourceId] = SourceId(_as_int(record.get(K.AUDIOID_IDENT)))
    except ValueError:
        source = None

    if source not in DURATION_EXEMPT and song.duration is not None:
        their_dur = _as_int(record.get(K.DURATION))
        if their_dur is None:
            notes.append("reject_no_duration")
            return breakdown
        diff = abs(their_dur - int(song.duration))
        breakdown.duration_diff = diff
        if diff > cfg.duration_tolerance_ms:
            notes.append(f"reject_duration:{diff}")
            return breakdown

    score = raw_score
    for key in (K.ALBUM, K.TITLE):
        if _str_mismatch(record, song, key):
            score -= cfg.score_penalty
            notes.append(f"penalty_{tag_name(key).lower()}")
    if source not in NO_TRACK_DATA:
        for key in (K.TRACKNUMBER, K.DISCNUMBER):
            if _num_mismatch(record, song, key):
                score -= cfg.score_penalty
                notes.append(f"penalty_{tag_name(key).lower()}")

    breakdown.accepted = True
    breakdown.score = score
    return breakdown


def rank_candidates(pool: ResponsePool, song: Song, cfg: ScoringConfig) -> RankedIndex:
    """Evaluate every closed candidate and build the ranked index.

    The adjusted score is written back onto accepted records.
    """
    ranked = RankedIndex()
    debug_logging = logger.isEnabledFor(logging.DEBUG)
    for index, record in pool.finalized():
        breakdown = evaluate_candidate(index, record, song, cfg)
        if debug_logging:
            logger.debug(
                f"candidate={index} raw={breakdown.raw_score} score={breakdown.score} "
                f"notes={breakdown.notes}"
            )
        if not breakdown.accepted:
            continue
        pool.set_value(index, K.AUDIOID_SCORE, breakdown.score)
        ranked.add_score(breakdown.score, index)
    logger.info(f"scoring: {len(ranked)} of {len(pool.finalized())} candidates accepted")
    return ranked


__all__ = [
    "ScoringConfig",
    "ScoreBreakdown",
    "DURATION_EXEMPT",
    "NO_TRACK_DATA",
    "evaluate_candidate",
    "rank_candidates",
]
