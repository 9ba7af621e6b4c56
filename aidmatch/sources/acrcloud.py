"""ACRCloud identify responses (JSON).

The status object is checked first: any code other than "0" (for instance
1001, no result) means the metadata block is absent or unusable.
"""
from __future__ import annotations
import logging

from ..match.pool import ResponsePool
from ..models import SourceId, Song
from ..parse import JsonDocumentParser
from ..parse.descriptor import (
    END,
    Descriptor,
    RoleMapping,
    array,
    data,
    data_array,
    tree,
    validate_descriptor,
)
from ..tags import AttributeKey as K
from .base import IdentificationSource, register_source

logger = logging.getLogger(__name__)

STATUS_OK = "0"

# AssociatedPerformer is left out: it would copy ARTIST onto itself.
ROLES = (
    RoleMapping("Conductor", K.CONDUCTOR),
    RoleMapping("Composer", K.COMPOSER),
    RoleMapping("MainArtist", K.ALBUMARTIST),
)

STATUS_DESCRIPTOR: Descriptor = (
    tree("status", [
        data(K.STATUS_CODE, "code"),
        data(K.STATUS_MSG, "msg"),
        END,
    ], top=True),
    END,
)

_music = [
    data(K.TITLE, "title"),
    data(K.AUDIOID_SCORE, "score"),
    data(K.DURATION, "duration_ms"),
    data(K.DATE, "release_date"),
    tree("album", [data(K.ALBUM, "name"), END]),
    array("artists", [
        data(K.ARTIST, "name"),
        # must follow the name
        data_array(K.ARTIST, "roles", ROLES),
        END,
    ]),
    END,
]

MUSIC_DESCRIPTOR: Descriptor = (
    tree("metadata", [array("music", _music, top=True), END]),
    END,
)


@register_source
class AcrCloudSource(IdentificationSource):
    """Audio recognition; the transport receives the Song (a sample of its file is uploaded)."""

    source_id = SourceId.ACRCLOUD

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        validate_descriptor(STATUS_DESCRIPTOR, "acrcloud-status")
        validate_descriptor(MUSIC_DESCRIPTOR, "acrcloud")

    def query(self, song: Song) -> Song:
        return song

    def check_status(self, raw: bytes) -> tuple[str | None, str | None]:
        """Status code and message, parsed into a scratch pool."""
        scratch = ResponsePool()
        JsonDocumentParser().parse_all(raw, STATUS_DESCRIPTOR, scratch, self.source_id)
        record = scratch.get(0)
        if record is None:
            return None, None
        return record.text(K.STATUS_CODE), record.text(K.STATUS_MSG)

    def parse(self, raw: bytes, pool: ResponsePool) -> int:
        code, msg = self.check_status(raw)
        if code != STATUS_OK:
            logger.info(f"{self.name}: status {code} {msg or ''}".rstrip())
            return 0
        return JsonDocumentParser().parse_all(raw, MUSIC_DESCRIPTOR, pool, self.source_id)


__all__ = ["AcrCloudSource", "ROLES", "STATUS_DESCRIPTOR", "MUSIC_DESCRIPTOR"]
