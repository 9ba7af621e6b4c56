"""Candidate store shared by every source during one lookup cycle.

The pool maps a candidate index to a CandidateRecord (attribute key -> value)
and carries the transient parse state: the index being populated, a pending
join phrase and a pending redirect key. One pool lives for one lookup cycle
and is reset when the next song's identification starts.
"""

from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple, Union

from ..errors import RecordIntegrityError
from ..tags import AttributeKey, ARTIST_SORT_KEYS, is_internal, tag_name

logger = logging.getLogger(__name__)

Value = Union[str, float, int]

K = AttributeKey

# Written only so that a pending redirect can pick the value up.
_SCRATCH_KEYS = frozenset({K.ROLE})

# Never copied from one candidate to the next.
_NO_PROPAGATE = frozenset({K.RESPIDX, K.AUDIOID_IDENT})


class CandidateRecord(dict):
    """Ordered mapping of attribute key to scalar value for one candidate."""

    def text(self, key: int) -> str | None:
        """Value as a string, None when absent or empty."""
        value = self.get(key)
        if value is None:
            return None
        if isinstance(value, float):
            value = f"{value:g}"
        value = str(value)
        return value or None

    def number(self, key: int) -> float | None:
        value = self.get(key)
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def is_empty(self, key: int) -> bool:
        return self.text(key) is None


class ResponsePool:
    """Candidate records for one lookup cycle plus pending parse state."""

    def __init__(self) -> None:
        self.records: Dict[int, CandidateRecord] = {}
        self.current_index = 0
        self.pending_join_phrase: str | None = None
        self.pending_redirect_key: AttributeKey | None = None

    def reset(self) -> None:
        """Drop every record and pending value; safe to call repeatedly."""
        self.records = {}
        self.current_index = 0
        self.pending_join_phrase = None
        self.pending_redirect_key = None

    # --- record access ------------------------------------------------------

    def get_or_create(self, index: int) -> CandidateRecord:
        record = self.records.get(index)
        if record is None:
            record = CandidateRecord()
            record[K.RESPIDX] = index
            self.records[index] = record
        return record

    def get(self, index: int) -> CandidateRecord | None:
        return self.records.get(index)

    def view(self, index: int) -> Mapping[int, Value] | None:
        """Read-only view of a record for consumers."""
        record = self.records.get(index)
        if record is None:
            return None
        return MappingProxyType(record)

    def _checked(self, index: int) -> CandidateRecord:
        record = self.get_or_create(index)
        stored = record.get(K.RESPIDX)
        if stored != index:
            raise RecordIntegrityError(index, stored)
        return record

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, index: object) -> bool:
        return index in self.records

    def __iter__(self) -> Iterator[int]:
        return iter(self.records)

    def finalized(self) -> List[Tuple[int, CandidateRecord]]:
        """Records closed by a parse pass, in index order."""
        return [
            (idx, self.records[idx])
            for idx in range(self.current_index)
            if idx in self.records
        ]

    # --- pending state ------------------------------------------------------

    def install_join_phrase(self, phrase: str | None) -> None:
        if not phrase:
            return
        self.pending_join_phrase = phrase

    def clear_join_phrase(self) -> None:
        self.pending_join_phrase = None

    def arm_redirect(self, key: AttributeKey | None) -> None:
        self.pending_redirect_key = key

    # --- writes -------------------------------------------------------------

    def set_value(self, index: int, key: AttributeKey, value: Value) -> bool:
        """Store a value for a candidate.

        Returns True when the value was joined onto an existing one with the
        pending join phrase (the phrase is consumed in that case).
        """
        try:
            record = self._checked(index)
        except RecordIntegrityError as exc:
            logger.warning(f"pool: write of {tag_name(key)} rejected: {exc}")
            return False

        if key == K.AUDIOID_SCORE:
            try:
                record[key] = float(value)
            except (TypeError, ValueError):
                logger.debug(f"pool: respidx {index} bad score {value!r}")
            return False

        joined = False
        if key not in _SCRATCH_KEYS:
            old = record.text(key)
            if self.pending_join_phrase is not None and old is not None:
                record[key] = f"{old}{self.pending_join_phrase}{value}"
                self.pending_join_phrase = None
                joined = True
            else:
                record[key] = value

        if self.pending_redirect_key is not None:
            target = self.pending_redirect_key
            if target == K.COMPOSER and key in ARTIST_SORT_KEYS:
                target = K.COMPOSER_SORT
            logger.debug(f"pool: respidx {index} redirect {tag_name(key)} -> {tag_name(target)}")
            record[target] = value
            self.pending_redirect_key = None

        return joined

    def overwrite(self, index: int, key: AttributeKey, value: Value) -> None:
        """Replace a field outright, ignoring pending join and redirect state."""
        try:
            record = self._checked(index)
        except RecordIntegrityError as exc:
            logger.warning(f"pool: overwrite of {tag_name(key)} rejected: {exc}")
            return
        record[key] = value

    def close_record(self, ident: int, first_index: int, propagate_score: bool = True,
                     fixed_score: float | None = None) -> int:
        """Finalize the record at current_index and advance to the next one.

        Fields still empty are filled from the previous candidate, as long as
        that candidate was produced by the same parse pass (first_index).
        Returns the index that was closed.
        """
        index = self.current_index
        try:
            record = self._checked(index)
        except RecordIntegrityError as exc:
            logger.warning(f"pool: close rejected: {exc}")
            self.current_index += 1
            return index

        record[K.AUDIOID_IDENT] = int(ident)
        if fixed_score is not None:
            record[K.AUDIOID_SCORE] = fixed_score

        previous = self.records.get(index - 1) if index > first_index else None
        if previous is not None:
            logger.debug(f"pool: propagate from {index - 1} to {index}")
            for key, value in previous.items():
                if key in _NO_PROPAGATE or is_internal(key):
                    continue
                if key == K.AUDIOID_SCORE and not propagate_score:
                    continue
                if record.is_empty(key):
                    record[key] = value

        self.pending_redirect_key = None
        self.current_index += 1
        logger.debug(f"pool: closed respidx {index}")
        return index

    def discard_open(self) -> None:
        """Remove a record that was written to but never closed."""
        if self.records.pop(self.current_index, None) is not None:
            logger.debug(f"pool: discarded open respidx {self.current_index}")


__all__ = ["CandidateRecord", "ResponsePool"]
