from __future__ import annotations
import os
import json
import logging
from typing import Any, Dict
from pathlib import Path
import copy

logger = logging.getLogger(__name__)

_DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "matching": {
        "min_score": 85.0,
        "duration_tolerance_ms": 2000,  # fingerprint services round to whole seconds
        "score_penalty": 1.0,
    },
    "sources": {
        "acoustid": True,
        "musicbrainz": True,
        "acrcloud": True,
    },
    "debug": {
        "dump_responses": False,
        "dump_dir": None,
    },
}

ENV_PREFIX = "AIDMATCH__"


def validate_matching(cfg: Dict[str, Any]) -> None:
    """Reject matching settings the scorer cannot work with.

    Raises:
        ValueError: If a threshold is out of range
    """
    matching = cfg.get("matching", {})
    min_score = matching.get("min_score", 85.0)
    if not isinstance(min_score, (int, float)) or not 0 <= min_score <= 100:
        raise ValueError(f"matching.min_score must be between 0 and 100, got {min_score!r}")
    tolerance = matching.get("duration_tolerance_ms", 2000)
    if not isinstance(tolerance, int) or isinstance(tolerance, bool) or tolerance < 0:
        raise ValueError(
            f"matching.duration_tolerance_ms must be a non-negative integer, got {tolerance!r}"
        )
    penalty = matching.get("score_penalty", 1.0)
    if not isinstance(penalty, (int, float)) or penalty < 0:
        raise ValueError(f"matching.score_penalty must be non-negative, got {penalty!r}")


def deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Merge dict b into a (shallow copies) returning new dict.
    Nested dicts are merged recursively; other values override.
    """
    result = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)  # type: ignore[arg-type]
        else:
            result[k] = v
    return result


def _strip_inline_comment(val: str) -> str:
    in_single = False
    in_double = False
    chars = []
    for ch in val:
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        if ch == '#' and not in_single and not in_double:
            break
        chars.append(ch)
    return ''.join(chars).rstrip()


def _load_dotenv(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, val = line.split('=', 1)
        key = key.strip()
        val = val.strip()
        if '#' in val:
            val = _strip_inline_comment(val)
        if len(val) >= 2 and val[0] == val[-1] and val[0] in ('"', "'"):
            val = val[1:-1]
        if key:
            values[key] = val
    return values


def load_config(overrides: Dict[str, Any] | None = None, dotenv_path: str | Path = '.env') -> Dict[str, Any]:
    """Load configuration merging defaults <- .env <- environment <- overrides.

    During test runs (detected via PYTEST_CURRENT_TEST) .env loading is skipped
    unless AIDMATCH_ENABLE_DOTENV=1 is set, so tests see deterministic defaults.

    Args:
        overrides: Dict of values to deep-merge last (primarily for tests).
        dotenv_path: Location of the .env file.

    Returns:
        dict: Configuration dictionary (for typed access use load_typed_config()).
    """
    dotenv_values: Dict[str, str] = {}
    if os.environ.get('AIDMATCH_ENABLE_DOTENV') or not os.environ.get('PYTEST_CURRENT_TEST'):
        dotenv_values = _load_dotenv(Path(dotenv_path))
    cfg: Dict[str, Any] = copy.deepcopy(_DEFAULTS)

    # real environment wins over .env
    combined = {**{k: v for k, v in dotenv_values.items() if k.startswith(ENV_PREFIX)},
                **{k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)}}
    for raw_key, value in combined.items():
        path_parts = raw_key[len(ENV_PREFIX):].split("__")
        cursor: Dict[str, Any] = cfg
        for part in path_parts[:-1]:
            cursor = cursor.setdefault(part.lower(), {})  # type: ignore[assignment]
        cursor[path_parts[-1].lower()] = coerce_scalar(value)
    if overrides:
        cfg = deep_merge(cfg, overrides)

    validate_matching(cfg)
    _configure_logging(cfg.get('log_level', 'INFO'))
    return cfg


def load_typed_config(overrides: Dict[str, Any] | None = None, dotenv_path: str | Path = '.env'):
    """Load configuration as typed AppConfig object.

    Returns:
        AppConfig: Typed configuration object with .to_dict() for dict conversion
    """
    from .config_types import AppConfig
    return AppConfig.from_dict(load_config(overrides, dotenv_path))


def _configure_logging(level_str: str) -> None:
    """Configure Python logging based on configured level."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL,
    }
    level = level_map.get(str(level_str).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(message)s',
        force=True,
    )


def coerce_scalar(value: str) -> Any:
    txt = value.strip()
    # JSON object or array
    if (txt.startswith('[') and txt.endswith(']')) or (txt.startswith('{') and txt.endswith('}')):
        try:
            return json.loads(txt)
        except ValueError:
            pass
    lower = txt.lower()
    if lower in {"true", "yes"}:
        return True
    if lower in {"false", "no"}:
        return False
    if lower in {"none", "null"}:
        return None
    if txt.isdigit() or (txt.startswith("-") and txt[1:].isdigit()):
        return int(txt)
    try:
        return float(txt)
    except ValueError:
        return txt


__all__ = ["load_config", "deep_merge", "load_typed_config", "validate_matching", "coerce_scalar"]
