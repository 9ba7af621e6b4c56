"""Attribute keys shared by the parse engine, the response pool and the scorer.

Song metadata fields and internal parse markers live in one integer
namespace. Metadata fields are numbered from 0; internal markers start at
``INTERNAL_BASE`` so the two ranges never overlap.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, FrozenSet

INTERNAL_BASE = 100


class AttributeKey(IntEnum):
    # --- song metadata ---
    TITLE = 0
    ARTIST = 1
    ALBUM = 2
    ALBUMARTIST = 3
    TRACKNUMBER = 4
    TRACKTOTAL = 5
    DISCNUMBER = 6
    DISCTOTAL = 7
    DATE = 8
    DURATION = 9
    RECORDING_ID = 10
    WORK_ID = 11
    TRACK_ID = 12
    COMPOSER = 13
    CONDUCTOR = 14
    ARTIST_SORT = 15
    ALBUMARTIST_SORT = 16
    COMPOSER_SORT = 17
    ALBUM_SORT = 18
    GENRE = 19
    AUDIOID_SCORE = 20
    AUDIOID_IDENT = 21

    # --- internal markers ---
    RESPIDX = INTERNAL_BASE
    ARRAY = INTERNAL_BASE + 1
    JOINPHRASE = INTERNAL_BASE + 2
    TOP = INTERNAL_BASE + 3
    ARTIST_TYPE = INTERNAL_BASE + 4
    MONTH = INTERNAL_BASE + 5
    STATUS_CODE = INTERNAL_BASE + 6
    STATUS_MSG = INTERNAL_BASE + 7
    ROLE = INTERNAL_BASE + 8


@dataclass(frozen=True)
class TagDef:
    """Display name plus flags for a metadata key."""
    tag: str
    audioid: bool = False  # participates in audio-id identity
    numeric: bool = False


K = AttributeKey

TAG_DEFS: Dict[AttributeKey, TagDef] = {
    K.TITLE: TagDef("TITLE", audioid=True),
    K.ARTIST: TagDef("ARTIST", audioid=True),
    K.ALBUM: TagDef("ALBUM", audioid=True),
    K.ALBUMARTIST: TagDef("ALBUMARTIST", audioid=True),
    K.TRACKNUMBER: TagDef("TRACKNUMBER", audioid=True, numeric=True),
    K.TRACKTOTAL: TagDef("TRACKTOTAL", audioid=True, numeric=True),
    K.DISCNUMBER: TagDef("DISCNUMBER", audioid=True, numeric=True),
    K.DISCTOTAL: TagDef("DISCTOTAL", audioid=True, numeric=True),
    K.DATE: TagDef("DATE", audioid=True),
    K.DURATION: TagDef("DURATION", audioid=True, numeric=True),
    K.RECORDING_ID: TagDef("RECORDING_ID", audioid=True),
    K.WORK_ID: TagDef("WORK_ID", audioid=True),
    K.TRACK_ID: TagDef("TRACK_ID"),
    K.COMPOSER: TagDef("COMPOSER", audioid=True),
    K.CONDUCTOR: TagDef("CONDUCTOR", audioid=True),
    K.ARTIST_SORT: TagDef("ARTIST_SORT"),
    K.ALBUMARTIST_SORT: TagDef("ALBUMARTIST_SORT"),
    K.COMPOSER_SORT: TagDef("COMPOSER_SORT"),
    K.ALBUM_SORT: TagDef("ALBUM_SORT"),
    K.GENRE: TagDef("GENRE"),
    K.AUDIOID_SCORE: TagDef("AUDIOID_SCORE", audioid=True, numeric=True),
    K.AUDIOID_IDENT: TagDef("AUDIOID_IDENT", audioid=True, numeric=True),
}

# Keys compared by the deduplicator: every audio-id field except the score
# and the source identifier, which legitimately differ between duplicates.
DUPLICATE_CHECK_KEYS: FrozenSet[AttributeKey] = frozenset(
    key for key, tdef in TAG_DEFS.items()
    if tdef.audioid and key not in (K.AUDIOID_SCORE, K.AUDIOID_IDENT)
)

# Artist-sort style keys that a pending composer redirect upgrades to
# COMPOSER_SORT.
ARTIST_SORT_KEYS: FrozenSet[AttributeKey] = frozenset({K.ARTIST_SORT, K.ALBUMARTIST_SORT})


def is_internal(key: int) -> bool:
    return key >= INTERNAL_BASE


def tag_name(key: int) -> str:
    """Human readable name for a key, used in logs and CLI output."""
    try:
        akey = AttributeKey(key)
    except ValueError:
        return f"key-{key}"
    tdef = TAG_DEFS.get(akey)
    if tdef is not None:
        return tdef.tag
    return akey.name


__all__ = [
    "AttributeKey",
    "TagDef",
    "TAG_DEFS",
    "DUPLICATE_CHECK_KEYS",
    "ARTIST_SORT_KEYS",
    "INTERNAL_BASE",
    "is_internal",
    "tag_name",
]
