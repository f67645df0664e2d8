"""Empirical thresholds for the extraction and validation heuristics.

Values live in ``thresholds.yaml`` next to this module (shipped as package
data) and are read once per process. Callers use the typed section accessors
so a malformed value falls back to the caller's default instead of leaking a
string into a numeric comparison.
"""

from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

THRESHOLDS_PATH = Path(__file__).resolve().with_name("thresholds.yaml")
SECTIONS = ("extraction", "validation")

Number = TypeVar("Number", int, float)


@lru_cache(maxsize=1)
def get_thresholds_config() -> dict[str, Any]:
    import yaml

    try:
        raw = THRESHOLDS_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read thresholds config '{THRESHOLDS_PATH}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in thresholds config '{THRESHOLDS_PATH}': {exc}") from exc

    if not isinstance(parsed, dict) or not all(isinstance(parsed.get(name), dict) for name in SECTIONS):
        raise RuntimeError(
            f"Invalid thresholds config '{THRESHOLDS_PATH}': expected mappings for {', '.join(SECTIONS)}."
        )
    return parsed


def get_threshold(path: str, default: Any = None) -> Any:
    """Raw dot-path lookup, e.g. 'validation.min_chars'."""
    if not path:
        return default

    current: Any = get_thresholds_config()
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def _typed(section: str, key: str, default: Number) -> Number:
    value = get_threshold(f"{section}.{key}", default)
    if isinstance(value, bool):
        value = default
    try:
        return type(default)(value)
    except (TypeError, ValueError):
        logger.warning("threshold_invalid key=%s.%s value=%r default=%r", section, key, value, default)
        return default


def extraction_limit(key: str, default: Number) -> Number:
    return _typed("extraction", key, default)


def validation_limit(key: str, default: Number) -> Number:
    return _typed("validation", key, default)
