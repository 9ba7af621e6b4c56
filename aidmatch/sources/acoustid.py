"""AcoustID fingerprint lookup responses.

The lookup is requested with meta=recordings+releasegroups+releases+tracks
and may come back as JSON or XML; both shapes carry the same nesting:

    results -> recordings -> releasegroups -> releases -> mediums -> tracks

Each release becomes one candidate. Values found higher up (score, recording
title, artists) are written to the candidate being built and reach the
following releases through propagation.
"""
from __future__ import annotations
import logging

from ..match.pool import ResponsePool
from ..models import SourceId, Song
from ..parse.descriptor import END, Descriptor, array, data, tree, validate_descriptor
from ..tags import AttributeKey as K
from .base import IdentificationSource, register_source

logger = logging.getLogger(__name__)


def _build(xml: bool) -> Descriptor:
    # JSON arrays are addressed by key; XML wraps each item in its own element
    def items(name: str, child: str) -> str:
        return f"{name}/{child}" if xml else name

    date = tree("date", [
        data(K.DATE, "year"),
        data(K.MONTH, "month"),
        END,
    ])
    mediums = array(items("mediums", "medium"), [
        data(K.DISCNUMBER, "position"),
        data(K.TRACKTOTAL, "track_count"),
        array(items("tracks", "track"), [
            data(K.TRACKNUMBER, "position"),
            END,
        ]),
        END,
    ])
    releases = array(items("releases", "release"), [
        data(K.ALBUM, "title"),
        data(K.DISCTOTAL, "medium_count"),
        date,
        mediums,
        END,
    ], top=True)
    artists = array(items("artists", "artist"), [
        data(K.ARTIST, "name"),
        data(K.JOINPHRASE, "joinphrase"),
        END,
    ])
    recordings = array(items("recordings", "recording"), [
        data(K.RECORDING_ID, "id"),
        data(K.TITLE, "title"),
        data(K.DURATION, "duration", scale=1000),  # seconds
        artists,
        array(items("releasegroups", "releasegroup"), [releases, END]),
        END,
    ])
    results = array(items("results", "result"), [
        data(K.AUDIOID_SCORE, "score"),
        recordings,
        END,
    ])
    if xml:
        return (tree("response", [results, END]), END)
    return (results, END)


JSON_DESCRIPTOR: Descriptor = _build(xml=False)
XML_DESCRIPTOR: Descriptor = _build(xml=True)


@register_source
class AcoustIdSource(IdentificationSource):
    """Fingerprint lookup; the transport receives the Song (its file is fingerprinted)."""

    source_id = SourceId.ACOUSTID

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        validate_descriptor(JSON_DESCRIPTOR, "acoustid-json")
        validate_descriptor(XML_DESCRIPTOR, "acoustid-xml")

    def query(self, song: Song) -> Song:
        return song

    def parse(self, raw: bytes, pool: ResponsePool) -> int:
        parser = self.parser_for(raw)
        descriptor = XML_DESCRIPTOR if parser.fmt == "xml" else JSON_DESCRIPTOR
        return parser.parse_all(raw, descriptor, pool, self.source_id)


__all__ = ["AcoustIdSource", "JSON_DESCRIPTOR", "XML_DESCRIPTOR"]
