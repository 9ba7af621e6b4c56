"""Identification sources public API.

Importing this package registers the three built-in sources.
"""

from .base import (
    Transport,
    FilePayloadTransport,
    IdentificationSource,
    looks_like_xml,
    register_source,
    get_source_class,
    available_sources,
)
from .acoustid import AcoustIdSource
from .musicbrainz import MusicBrainzSource
from .acrcloud import AcrCloudSource

__all__ = [
    "Transport",
    "FilePayloadTransport",
    "IdentificationSource",
    "looks_like_xml",
    "register_source",
    "get_source_class",
    "available_sources",
    "AcoustIdSource",
    "MusicBrainzSource",
    "AcrCloudSource",
]
