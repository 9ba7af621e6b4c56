"""Exception types raised inside the matching engine.

Most of these are recovered locally (see the parse engine and the response
pool); only programmer errors such as a malformed descriptor or starting a
second lookup mid-cycle reach the caller.
"""
from __future__ import annotations


class AudioIdError(Exception):
    """Base class for all aidmatch errors."""


class DocumentParseError(AudioIdError):
    """A response payload could not be parsed at the top level."""

    def __init__(self, fmt: str, detail: str):
        super().__init__(f"{fmt} parse failed: {detail}")
        self.fmt = fmt
        self.detail = detail


class RecordIntegrityError(AudioIdError):
    """A candidate record's stored index disagrees with its pool slot."""

    def __init__(self, index: int, stored: object):
        super().__init__(f"record at index {index} claims index {stored}")
        self.index = index
        self.stored = stored


class DescriptorError(AudioIdError):
    """A descriptor tree is structurally invalid."""


class LookupInProgressError(AudioIdError):
    """A new song was submitted before the current lookup cycle finished."""


__all__ = [
    "AudioIdError",
    "DocumentParseError",
    "RecordIntegrityError",
    "DescriptorError",
    "LookupInProgressError",
]
