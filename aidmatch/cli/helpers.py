from __future__ import annotations
import click

from ..config import load_typed_config
from ..version import __version__

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


@click.group()
@click.version_option(version=__version__, prog_name="aidmatch")
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help='Override the configured log level')
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Audio identification matcher.

    Parses identification service responses, scores the candidates against
    the song you already know about and prints the ranked result.

    \b
    TYPICAL WORKFLOWS:

    \b
    Rank saved responses for a song:
      aidmatch identify --title "So What" --duration 545000 \\
          --fingerprint acoustid.json --recognition acr.json

    \b
    Check what a descriptor extracts from one payload:
      aidmatch parse musicbrainz recording.xml

    \b
    Settings come from AIDMATCH__* environment variables or a .env file:
      AIDMATCH__MATCHING__MIN_SCORE=80
      aidmatch config --section matching
    """
    if isinstance(ctx.obj, dict):
        return
    overrides = {'log_level': log_level.upper()} if log_level else None
    ctx.obj = load_typed_config(overrides).to_dict()


__all__ = ["cli"]
