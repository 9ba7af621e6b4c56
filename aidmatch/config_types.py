"""Typed configuration dataclasses for aidmatch.

Provides strongly-typed configuration objects mirroring the nested dict
returned by load_config().
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, Any


@dataclass
class MatchingConfig:
    """Candidate filter thresholds (aligned with _DEFAULTS)."""
    min_score: float = 85.0  # 0-100 scale after source normalization
    duration_tolerance_ms: int = 2000
    score_penalty: float = 1.0  # subtracted per mismatching field

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class SourcesConfig:
    """Which identification sources take part in a lookup cycle."""
    acoustid: bool = True
    musicbrainz: bool = True
    acrcloud: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def enabled(self, label: str) -> bool:
        return bool(getattr(self, label, False))


@dataclass
class DebugConfig:
    """Raw payload dump settings."""
    dump_responses: bool = False
    dump_dir: str | None = None  # None: system temp directory

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "matching": self.matching.to_dict(),
            "sources": self.sources.to_dict(),
            "debug": self.debug.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            matching=MatchingConfig(**data.get("matching", {})),
            sources=SourcesConfig(**data.get("sources", {})),
            debug=DebugConfig(**data.get("debug", {})),
        )


class TypedConfigDict(dict):
    """Dictionary wrapper that provides typed access to config sections.

    - dict access: cfg['matching']['min_score']
    - typed access: cfg.typed.matching.min_score
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._typed_cache: AppConfig | None = None

    @property
    def typed(self) -> AppConfig:
        if self._typed_cache is None:
            self._typed_cache = AppConfig.from_dict(self)
        return self._typed_cache

    def __setitem__(self, key, value):
        """Invalidate typed cache when dict is modified."""
        super().__setitem__(key, value)
        self._typed_cache = None

    def update(self, *args, **kwargs):
        super().update(*args, **kwargs)
        self._typed_cache = None


__all__ = ["MatchingConfig", "SourcesConfig", "DebugConfig", "AppConfig", "TypedConfigDict"]
