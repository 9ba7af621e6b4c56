"""Module entry point for `python -m aidmatch.cli`."""
from __future__ import annotations

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from aidmatch.cli import cli

    cli()
