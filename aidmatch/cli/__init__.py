"""CLI package bootstrap.

Defines root group (`cli`) in helpers and imports submodules so their
decorators register commands.
"""
from aidmatch.cli.helpers import cli  # root group
from aidmatch.cli import identify_cmds  # noqa: F401
from aidmatch.cli import config_cmds  # noqa: F401

__all__ = ["cli"]
