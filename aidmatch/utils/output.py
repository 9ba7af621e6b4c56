"""Output formatting utilities for consistent CLI reporting."""

from __future__ import annotations
from typing import Any, Dict, Mapping

import click

from ..models import SourceId
from ..tags import AttributeKey, is_internal, tag_name


def section_header(text: str) -> str:
    """Format a section header with color."""
    return click.style(f"▶ {text}", fg='cyan', bold=True)


def success(text: str, prefix: str = "✓") -> str:
    return f"{click.style(prefix, fg='green')} {text}"


def warning(text: str, prefix: str = "⚠") -> str:
    return f"{click.style(prefix, fg='yellow')} {text}"


def info(text: str) -> str:
    return f"  {click.style('•', fg='blue')} {text}"


def source_label(value: Any) -> str:
    try:
        return SourceId(int(value)).label
    except (TypeError, ValueError):
        return "?"


def record_to_dict(record: Mapping) -> Dict[str, Any]:
    """Candidate record keyed by tag name, internal markers left out.

    Args:
        record: Mapping of attribute key to value (pool record or view)

    Returns:
        Plain dict suitable for JSON output
    """
    out: Dict[str, Any] = {}
    for key, value in record.items():
        if is_internal(key):
            continue
        if key == AttributeKey.AUDIOID_IDENT:
            out["SOURCE"] = source_label(value)
            continue
        out[tag_name(key)] = value
    return out


def candidate_line(rank: int, index: int, record: Mapping) -> str:
    """One line summary of a candidate: score, source, title, artist, album."""
    score = record.get(AttributeKey.AUDIOID_SCORE)
    score_txt = f"{score:6.1f}" if isinstance(score, float) else "     -"
    parts = [
        click.style(f"{rank:>3}.", bold=True),
        click.style(score_txt, fg='green'),
        f"[{source_label(record.get(AttributeKey.AUDIOID_IDENT))}]",
        f"#{index}",
        str(record.get(AttributeKey.TITLE, "")),
    ]
    artist = record.get(AttributeKey.ARTIST)
    if artist:
        parts.append(f"- {artist}")
    album = record.get(AttributeKey.ALBUM)
    if album:
        parts.append(click.style(f"({album})", dim=True))
    return " ".join(parts)


__all__ = [
    "section_header",
    "success",
    "warning",
    "info",
    "source_label",
    "record_to_dict",
    "candidate_line",
]
