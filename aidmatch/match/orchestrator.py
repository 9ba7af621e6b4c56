"""Lookup cycle driver for one song.

AudioIdentifier is a small state machine advanced one step per poll() call
so a UI loop can interleave it with other work:

    OFF/FINISH -> START -> WAIT (one source per poll) -> PROCESS -> FINISH

Sources run in the order fingerprint, recording lookup, recognition. When
the recording lookup produces candidates the remaining sources are skipped:
a known recording id is more reliable than anything the others return.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Mapping, Optional

from ..errors import LookupInProgressError
from ..models import SourceId, Song
from .dedup import deduplicate
from .pool import ResponsePool
from .ranking import RankedIndex
from .scoring import ScoringConfig, rank_candidates

if TYPE_CHECKING:
    from ..config_types import AppConfig
    from ..sources.base import IdentificationSource, Transport

logger = logging.getLogger(__name__)


class LookupState(Enum):
    OFF = "off"
    START = "start"
    WAIT = "wait"
    PROCESS = "process"
    FINISH = "finish"


_IN_PROGRESS = frozenset({LookupState.START, LookupState.WAIT, LookupState.PROCESS})


class AudioIdentifier:
    """Runs one lookup cycle at a time and exposes the ranked result.

    Any of the three sources may be None; a missing source contributes no
    candidates but still takes its turn in the WAIT state.
    """

    def __init__(self, fingerprint: IdentificationSource | None = None,
                 recording: IdentificationSource | None = None,
                 recognition: IdentificationSource | None = None,
                 scoring: ScoringConfig | None = None):
        self._sources: List[Optional[IdentificationSource]] = [fingerprint, recording, recognition]
        self.scoring = scoring or ScoringConfig()
        self.state = LookupState.OFF
        self._pool = ResponsePool()
        self._ranked = RankedIndex()
        self._song: Song | None = None
        self._source_pos = 0

    @classmethod
    def from_config(cls, cfg: AppConfig, fingerprint: Transport | None = None,
                    recording: Transport | None = None,
                    recognition: Transport | None = None) -> AudioIdentifier:
        """Build the three sources from configuration and transports.

        Sources disabled in cfg.sources are left out.
        """
        from ..sources import AcoustIdSource, AcrCloudSource, MusicBrainzSource

        def build(source_cls, transport):
            if not cfg.sources.enabled(source_cls.source_id.label):
                logger.debug(f"source {source_cls.source_id.label} disabled")
                return None
            return source_cls(
                transport,
                dump_responses=cfg.debug.dump_responses,
                dump_dir=cfg.debug.dump_dir,
            )

        return cls(
            fingerprint=build(AcoustIdSource, fingerprint),
            recording=build(MusicBrainzSource, recording),
            recognition=build(AcrCloudSource, recognition),
            scoring=ScoringConfig.from_matching(cfg.matching),
        )

    # --- cycle control ------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self.state in _IN_PROGRESS

    def begin_lookup(self, song: Song) -> None:
        """Set the song for the next cycle; the cycle starts on the next poll().

        Raises:
            LookupInProgressError: If a cycle is still running
        """
        if self.busy:
            raise LookupInProgressError(
                f"lookup in progress (state {self.state.value}); finish it before starting another"
            )
        self._song = song
        self.state = LookupState.OFF

    def poll(self) -> bool:
        """Advance the cycle by one step; True when the ranked result is ready."""
        state = self.state
        if state in (LookupState.OFF, LookupState.FINISH):
            if self._song is None:
                return False
            self._source_pos = 0
            self.state = LookupState.START
            logger.debug("audioid: start")
            return False

        if state is LookupState.START:
            self._pool.reset()
            self._ranked = RankedIndex()
            self.state = LookupState.WAIT
            return False

        if state is LookupState.WAIT:
            self._run_next_source()
            return False

        # PROCESS
        ranked = rank_candidates(self._pool, self._song, self.scoring)
        self._ranked = deduplicate(self._pool, ranked)
        self.state = LookupState.FINISH
        logger.info(f"audioid: {len(self._ranked)} candidates after filtering")
        return True

    def run(self, max_steps: int = 100) -> bool:
        """Poll until the cycle completes; False if it did not within max_steps."""
        for _ in range(max_steps):
            if self.poll():
                return True
        return False

    def _run_next_source(self) -> None:
        pos = self._source_pos
        source = self._sources[pos]
        count = 0
        if source is not None:
            count = source.lookup(self._song, self._pool)
        self._source_pos += 1
        if source is not None and source.source_id is SourceId.MUSICBRAINZ and count > 0:
            logger.debug("audioid: recording lookup found candidates, skipping remaining sources")
            self.state = LookupState.PROCESS
        elif self._source_pos >= len(self._sources):
            self.state = LookupState.PROCESS

    # --- results ------------------------------------------------------------

    @property
    def pool(self) -> ResponsePool:
        return self._pool

    @property
    def ranked(self) -> RankedIndex:
        return self._ranked

    def start_iteration(self) -> None:
        self._ranked.start_iteration()

    def next(self) -> int | None:
        return self._ranked.next()

    def __iter__(self) -> Iterator[int]:
        return iter(self._ranked)

    def get_record(self, index: int) -> Mapping | None:
        """Read-only view of one candidate."""
        return self._pool.view(index)


__all__ = ["AudioIdentifier", "LookupState"]
