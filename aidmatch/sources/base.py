"""Identification source abstraction.

A source turns a song into one raw payload (through an injected transport)
and parses that payload into the shared response pool with its own
descriptor trees. Transports are plain callables so the network layer stays
outside this package; tests and the CLI hand in payloads read from disk.

Key abstractions:
- Transport: callable returning the raw response bytes or None
- IdentificationSource: one service, its descriptors and its parser choice
- FilePayloadTransport: transport that replays a saved response file
"""
from __future__ import annotations
import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type

from ..match.pool import ResponsePool
from ..models import SourceId, Song
from ..parse import JsonDocumentParser, XmlDocumentParser
from ..parse.base import DocumentParser

logger = logging.getLogger(__name__)

Transport = Callable[[Any], Optional[bytes]]

UTF8_BOM = b"\xef\xbb\xbf"


def looks_like_xml(raw: bytes) -> bool:
    """Sniff the payload format from its first non-blank byte."""
    if raw.startswith(UTF8_BOM):
        raw = raw[len(UTF8_BOM):]
    return raw.lstrip()[:1] == b"<"


class FilePayloadTransport:
    """Transport that returns the bytes of a saved response file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __call__(self, query: Any) -> bytes | None:
        if not self.path.exists():
            logger.warning(f"payload file not found: {self.path}")
            return None
        return self.path.read_bytes()

    def __repr__(self) -> str:
        return f"FilePayloadTransport({str(self.path)!r})"


# ---------------- Source base class -----------------

class IdentificationSource(ABC):
    """One identification service feeding candidates into the pool.

    Subclasses declare their source_id and implement query() and parse().
    lookup() ties the two together and is what the orchestrator calls.
    """

    source_id: SourceId

    def __init__(self, transport: Transport | None = None, dump_responses: bool = False,
                 dump_dir: str | Path | None = None):
        self.transport = transport
        self.dump_responses = dump_responses
        self.dump_dir = Path(dump_dir) if dump_dir else None

    @property
    def name(self) -> str:
        return self.source_id.label

    @abstractmethod
    def query(self, song: Song) -> Any:
        """Value handed to the transport, or None when the song cannot be looked up."""

    @abstractmethod
    def parse(self, raw: bytes, pool: ResponsePool) -> int:
        """Parse one raw payload into the pool and return the candidate count."""

    def parser_for(self, raw: bytes) -> DocumentParser:
        if looks_like_xml(raw):
            return XmlDocumentParser()
        return JsonDocumentParser()

    def lookup(self, song: Song, pool: ResponsePool) -> int:
        """Fetch and parse one response for a song.

        Returns:
            Number of candidates added to the pool (0 when skipped)
        """
        query = self.query(song)
        if query is None:
            logger.debug(f"{self.name}: nothing to look up")
            return 0
        if self.transport is None:
            logger.debug(f"{self.name}: no transport configured")
            return 0
        try:
            raw = self.transport(query)
        except Exception as exc:
            logger.warning(f"{self.name}: transport failed: {exc}")
            return 0
        if not raw:
            logger.info(f"{self.name}: empty response")
            return 0
        if self.dump_responses:
            self.dump(raw)
        count = self.parse(raw, pool)
        logger.info(f"{self.name}: {count} candidates")
        return count

    def dump(self, raw: bytes) -> Path:
        """Write the raw payload to <dump_dir>/out-<source>.<xml|json>."""
        directory = self.dump_dir or Path(tempfile.gettempdir())
        directory.mkdir(parents=True, exist_ok=True)
        suffix = "xml" if looks_like_xml(raw) else "json"
        target = directory / f"out-{self.name}.{suffix}"
        target.write_bytes(raw)
        logger.debug(f"{self.name}: response written to {target}")
        return target


# ---------------- Source registry -----------------

_source_classes: Dict[str, Type[IdentificationSource]] = {}


def register_source(cls: Type[IdentificationSource]) -> Type[IdentificationSource]:
    """Register a source class under its label; usable as a decorator."""
    _source_classes[cls.source_id.label] = cls
    return cls


def get_source_class(name: str) -> Type[IdentificationSource]:
    """Look a source class up by label.

    Raises:
        KeyError: If no source is registered under that name
    """
    return _source_classes[name]


def available_sources() -> list[str]:
    return sorted(_source_classes.keys())


__all__ = [
    "Transport",
    "looks_like_xml",
    "FilePayloadTransport",
    "IdentificationSource",
    "register_source",
    "get_source_class",
    "available_sources",
]
