"""Descriptor-driven traversal shared by the XML and JSON parsers.

The backends only know how to load a payload, look a path up relative to a
scope and turn a matched node into a scalar string. Everything else (the
node kinds, score normalization, join phrases, artist-role redirects, month
folding and record finalization) lives here so both wire formats populate
the response pool identically.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from ..errors import DocumentParseError
from ..match.pool import ResponsePool
from ..models import SourceId
from ..tags import AttributeKey, is_internal, tag_name
from .descriptor import DescriptorNode, NodeKind

logger = logging.getLogger(__name__)

K = AttributeKey

# Raw score multiplier per source: AcoustID reports 0.0-1.0, ACRCloud 0-100.
SCORE_SCALE: Dict[SourceId, float] = {
    SourceId.ACOUSTID: 100.0,
    SourceId.ACRCLOUD: 1.0,
}

# Sources without an intrinsic score get this value when a record closes.
FIXED_SCORE: Dict[SourceId, float] = {
    SourceId.MUSICBRAINZ: 100.0,
}

# Internal markers that are stored on the record like regular fields.
_STORED_MARKERS = frozenset({K.STATUS_CODE, K.STATUS_MSG, K.ROLE})


class _ParsePass:
    """State for one parse_all call."""

    def __init__(self, pool: ResponsePool, source_id: SourceId):
        self.pool = pool
        self.source_id = source_id
        self.first_index = pool.current_index

    def close(self) -> None:
        self.pool.close_record(
            self.source_id,
            self.first_index,
            propagate_score=self.source_id not in FIXED_SCORE,
            fixed_score=FIXED_SCORE.get(self.source_id),
        )


class DocumentParser(ABC):
    """Walks a descriptor tree over one parsed document."""

    fmt = "document"

    @abstractmethod
    def load(self, raw: bytes) -> Any:
        """Parse the payload and return the root scope.

        Raises:
            DocumentParseError: when the payload is not a well-formed document
        """

    @abstractmethod
    def find(self, scope: Any, node: DescriptorNode) -> List[Any]:
        """All matches for node.path relative to scope; empty when absent."""

    @abstractmethod
    def elements(self, matches: List[Any]) -> List[Any]:
        """The items an ARRAY or DATA_ARRAY node iterates over."""

    @abstractmethod
    def scalar(self, match: Any, attr: str | None) -> str | None:
        """Scalar text of a match, None when there is none."""

    def parse_all(self, raw: bytes, descriptor: Sequence[DescriptorNode],
                  pool: ResponsePool, source_id: SourceId) -> int:
        """Parse a payload into the pool and return the number of new candidates."""
        pool.discard_open()
        pool.clear_join_phrase()
        pool.arm_redirect(None)
        start = pool.current_index

        try:
            root = self.load(raw)
        except DocumentParseError as exc:
            logger.warning(f"{source_id.label}: {exc}")
            return 0

        ctx = _ParsePass(pool, source_id)
        self._walk(root, descriptor, ctx, 0)

        pool.clear_join_phrase()
        pool.arm_redirect(None)
        pool.discard_open()
        count = pool.current_index - start
        logger.debug(f"{self.fmt}-parse: {source_id.label} respcount: {count}")
        return count

    # --- traversal ----------------------------------------------------------

    def _walk(self, scope: Any, descriptor: Sequence[DescriptorNode],
              ctx: _ParsePass, level: int) -> None:
        indent = " " * (level * 2)
        for node in descriptor:
            if node.kind is NodeKind.END:
                break

            if node.kind is NodeKind.SET:
                logger.debug(f"{indent} set: {tag_name(node.key)} {node.path!r}")
                if node.key == K.JOINPHRASE:
                    ctx.pool.install_join_phrase(node.path)
                continue

            matches = self.find(scope, node)
            if not matches:
                logger.debug(f"{indent} {node.path}: not found")
                continue

            if node.kind is NodeKind.TREE:
                logger.debug(f"{indent} tree: {node.path}")
                self._walk(matches[0], node.children, ctx, level + 1)
                if node.key == K.TOP:
                    ctx.close()
            elif node.kind is NodeKind.ARRAY:
                items = self.elements(matches)
                logger.debug(f"{indent} array: {node.path} count: {len(items)}")
                for item in items:
                    self._walk(item, node.children, ctx, level + 1)
                    if node.key == K.TOP:
                        ctx.close()
                ctx.pool.clear_join_phrase()
            elif node.kind is NodeKind.DATA_ARRAY:
                self._data_array(node, self.elements(matches), ctx, indent)
            else:
                value = self.scalar(matches[0], node.attr)
                if value is None:
                    continue
                self._store(node, value, ctx, indent)

    def _data_array(self, node: DescriptorNode, items: List[Any],
                    ctx: _ParsePass, indent: str) -> None:
        pool = ctx.pool
        index = pool.current_index
        for item in items:
            name = self.scalar(item, None)
            if name is None:
                continue
            for role in node.roles:
                if name != role.name:
                    continue
                record = pool.get(index)
                value = record.text(node.key) if record is not None else None
                if value is not None:
                    logger.debug(f"{indent} role {name}: {tag_name(node.key)} -> {tag_name(role.key)}")
                    pool.set_value(index, role.key, value)
                break

    def _store(self, node: DescriptorNode, value: str, ctx: _ParsePass, indent: str) -> None:
        pool = ctx.pool
        index = pool.current_index
        key = node.key

        if key == K.AUDIOID_SCORE:
            scale = node.scale if node.scale is not None else SCORE_SCALE.get(ctx.source_id, 1.0)
            try:
                score = float(value) * scale
            except ValueError:
                logger.debug(f"{indent} bad score {value!r}")
                return
            logger.debug(f"{indent} set respidx: {index} {tag_name(key)} {score}")
            pool.set_value(index, key, score)
            return

        if node.scale is not None:
            try:
                value = format_number(float(value) * node.scale)
            except ValueError:
                logger.debug(f"{indent} bad number for {tag_name(key)}: {value!r}")
                return

        if key == K.JOINPHRASE:
            logger.debug(f"{indent} store joinphrase {value!r}")
            pool.install_join_phrase(value)
            return

        if key == K.ARTIST_TYPE:
            lowered = value.lower()
            if "conductor" in lowered:
                pool.arm_redirect(K.CONDUCTOR)
            elif "composer" in lowered:
                pool.arm_redirect(K.COMPOSER)
            else:
                pool.arm_redirect(None)
            logger.debug(f"{indent} artist type {value!r} redirect: {pool.pending_redirect_key}")
            return

        if key == K.MONTH:
            record = pool.get(index)
            date = record.text(K.DATE) if record is not None else None
            if date is None:
                logger.debug(f"{indent} month {value!r} without a date, dropped")
                return
            try:
                month = int(value)
            except ValueError:
                logger.debug(f"{indent} bad month {value!r}")
                return
            logger.debug(f"{indent} set respidx: {index} DATE {date}-{month:02d}")
            pool.overwrite(index, K.DATE, f"{date}-{month:02d}")
            return

        if is_internal(key) and key not in _STORED_MARKERS:
            logger.debug(f"{indent} marker {tag_name(key)} is not a data target")
            return

        logger.debug(f"{indent} set respidx: {index} {tag_name(key)} {value}")
        pool.set_value(index, key, value)


def format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


__all__ = ["DocumentParser", "SCORE_SCALE", "FIXED_SCORE", "format_number"]
