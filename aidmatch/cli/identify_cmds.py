"""Identification commands: rank saved responses, inspect one payload."""

from __future__ import annotations
import json as _json
import logging
from pathlib import Path

import click

from .helpers import cli
from ..config_types import AppConfig
from ..match.orchestrator import AudioIdentifier
from ..match.pool import ResponsePool
from ..models import Song
from ..sources import FilePayloadTransport, available_sources, get_source_class
from ..utils.output import candidate_line, info, record_to_dict, section_header, success, warning

logger = logging.getLogger(__name__)

_payload = click.Path(exists=True, dir_okay=False, path_type=Path)


def _transport(path: Path | None):
    return FilePayloadTransport(path) if path is not None else None


@cli.command()
@click.option('--title', help='Known song title')
@click.option('--artist', help='Known artist (display only)')
@click.option('--album', help='Known album title')
@click.option('--track', 'track_number', type=int, help='Known track number')
@click.option('--disc', 'disc_number', type=int, help='Known disc number')
@click.option('--duration', type=int, help='Known duration in milliseconds')
@click.option('--recording-id', help='MusicBrainz recording id (enables the recording lookup)')
@click.option('--fingerprint', type=_payload, help='Saved AcoustID response (JSON or XML)')
@click.option('--recording', type=_payload, help='Saved MusicBrainz recording response (XML)')
@click.option('--recognition', type=_payload, help='Saved ACRCloud response (JSON)')
@click.option('--json', 'as_json', is_flag=True, help='Print candidates as JSON')
@click.pass_context
def identify(ctx: click.Context, title, artist, album, track_number, disc_number, duration,
             recording_id, fingerprint, recording, recognition, as_json: bool):
    """Rank identification candidates for one song.

    Each payload option replays a saved service response; sources without a
    payload contribute nothing. The recording lookup only runs when
    --recording-id is given, and when it yields candidates the recognition
    response is not consulted.
    """
    cfg = AppConfig.from_dict(ctx.obj)
    song = Song(
        title=title,
        artist=artist,
        album=album,
        track_number=track_number,
        disc_number=disc_number,
        duration=duration,
        recording_id=recording_id,
    )
    identifier = AudioIdentifier.from_config(
        cfg,
        fingerprint=_transport(fingerprint),
        recording=_transport(recording),
        recognition=_transport(recognition),
    )
    identifier.begin_lookup(song)
    if not identifier.run():
        raise click.ClickException("lookup did not complete")

    ranked = list(identifier)
    if as_json:
        rows = []
        for rank, idx in enumerate(ranked, start=1):
            row = {"rank": rank, "index": idx}
            row.update(record_to_dict(identifier.get_record(idx)))
            rows.append(row)
        click.echo(_json.dumps(rows, indent=2, ensure_ascii=False))
        return

    click.echo(section_header(f"Candidates for {title or '(untitled)'}"))
    if not ranked:
        click.echo(warning("No viable candidates"))
        return
    for rank, idx in enumerate(ranked, start=1):
        click.echo(candidate_line(rank, idx, identifier.get_record(idx)))
    click.echo(success(f"{len(ranked)} candidates from {len(identifier.pool.finalized())} parsed"))


@cli.command(name="parse")
@click.argument('source', type=click.Choice(available_sources()))
@click.argument('payload', type=_payload)
@click.option('--json', 'as_json', is_flag=True, help='Print records as JSON')
def parse_payload(source: str, payload: Path, as_json: bool):
    """Parse one saved response with SOURCE's descriptors (no scoring).

    Useful to see what a descriptor extracts from a payload.
    """
    src = get_source_class(source)()
    pool = ResponsePool()
    count = src.parse(payload.read_bytes(), pool)
    records = [record_to_dict(record) for _, record in pool.finalized()]
    if as_json:
        click.echo(_json.dumps(records, indent=2, ensure_ascii=False))
        return
    click.echo(section_header(f"{source}: {count} records from {payload.name}"))
    for idx, record in enumerate(records):
        click.echo(click.style(f"#{idx}", bold=True))
        for name, value in record.items():
            click.echo(info(f"{name}: {value}"))


__all__ = ["identify", "parse_payload"]
