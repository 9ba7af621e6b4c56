"""Central version declaration for aidmatch.

Update this file when cutting a new release tag. Keep semantic versioning.
The CLI --version option reads from here; keep pyproject.toml in step.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
