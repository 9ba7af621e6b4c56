"""Domain models shared by the sources, the scorer and the CLI.

Key abstractions:
- SourceId: which identification service produced a candidate
- Song: metadata already known locally for the song being identified
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Any, Dict

from .tags import AttributeKey


class SourceId(IntEnum):
    """Identification source stamped on every candidate (AUDIOID_IDENT)."""
    ACOUSTID = 0
    MUSICBRAINZ = 1
    ACRCLOUD = 2

    @property
    def label(self) -> str:
        return _SOURCE_LABELS[self]


_SOURCE_LABELS = {
    SourceId.ACOUSTID: "acoustid",
    SourceId.MUSICBRAINZ: "musicbrainz",
    SourceId.ACRCLOUD: "acrcloud",
}


@dataclass(frozen=True)
class Song:
    """Locally known metadata for the song under identification.

    duration is in milliseconds. file is only handed through to transports
    (the recognition and fingerprint services work from the audio file).
    """
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    track_number: int | None = None
    disc_number: int | None = None
    duration: int | None = None
    recording_id: str | None = None
    file: str | None = None

    def get(self, key: AttributeKey) -> Any:
        """Return the value stored for an attribute key, or None."""
        attr = _SONG_FIELDS.get(key)
        if attr is None:
            return None
        return getattr(self, attr)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Song:
        known = {f: data.get(f) for f in cls.__dataclass_fields__}
        return cls(**known)


_SONG_FIELDS = {
    AttributeKey.TITLE: "title",
    AttributeKey.ARTIST: "artist",
    AttributeKey.ALBUM: "album",
    AttributeKey.TRACKNUMBER: "track_number",
    AttributeKey.DISCNUMBER: "disc_number",
    AttributeKey.DURATION: "duration",
    AttributeKey.RECORDING_ID: "recording_id",
}


__all__ = ["SourceId", "Song"]
