"""MusicBrainz recording lookup (XML web service).

Requested as /recording/<id>?inc=artist-credits+work-rels+artist-rels+
releases+media. The recording is already known to be the right one, so
each release in the release-list becomes a candidate with a fixed score of
100 and no duration check.

The medium-list count is the number of mediums, not the disc total, so
DISCTOTAL is left unset.
"""
from __future__ import annotations
import logging

from ..match.pool import ResponsePool
from ..models import SourceId, Song
from ..parse import XmlDocumentParser
from ..parse.descriptor import END, Descriptor, array, data, tree, validate_descriptor
from ..tags import AttributeKey as K
from .base import IdentificationSource, register_source

logger = logging.getLogger(__name__)

_credit = [
    data(K.ARTIST, "artist/name"),
    data(K.JOINPHRASE, ".", attr="joinphrase"),
    END,
]

_album_credit = [
    data(K.ALBUMARTIST, "artist/name"),
    data(K.JOINPHRASE, ".", attr="joinphrase"),
    END,
]

# composer and conductor relations; other relation types are not stored
_artist_relation = [
    data(K.ARTIST_TYPE, ".", attr="type"),
    data(K.ROLE, "artist/name"),
    END,
]

_medium = [
    data(K.DISCNUMBER, "position"),
    data(K.TRACKNUMBER, "track-list/track/position"),
    data(K.DURATION, "track-list/track/length"),
    data(K.TRACKTOTAL, "track-list", attr="count"),
    END,
]

_release = [
    data(K.ALBUM, "title"),
    data(K.DATE, "date"),
    array("artist-credit/name-credit", _album_credit),
    tree("medium-list/medium", _medium),
    END,
]

_recording = [
    data(K.RECORDING_ID, ".", attr="id"),
    data(K.TITLE, "title"),
    data(K.DURATION, "length"),
    data(K.WORK_ID, "relation-list[@target-type='work']/relation/target"),
    array("relation-list[@target-type='artist']/relation", _artist_relation),
    array("artist-credit/name-credit", _credit),
    array("release-list/release", _release, top=True),
    END,
]

RECORDING_DESCRIPTOR: Descriptor = (
    tree("metadata", [tree("recording", _recording), END]),
    END,
)


@register_source
class MusicBrainzSource(IdentificationSource):
    """Recording lookup keyed by the song's MusicBrainz recording id."""

    source_id = SourceId.MUSICBRAINZ

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        validate_descriptor(RECORDING_DESCRIPTOR, "musicbrainz")

    def query(self, song: Song) -> str | None:
        return song.recording_id or None

    def parse(self, raw: bytes, pool: ResponsePool) -> int:
        return XmlDocumentParser().parse_all(raw, RECORDING_DESCRIPTOR, pool, self.source_id)


__all__ = ["MusicBrainzSource", "RECORDING_DESCRIPTOR"]
