"""Load and expose table column sets from columns.yaml (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import (
    BOOKING_COLUMNS,
    CM_COLUMNS,
    HISTORY_COLUMNS,
    MISSING_STORY_COLUMNS,
    RELEASE_STORY_COLUMNS,
)

logger = logging.getLogger(__name__)

_CACHE: dict[str, list[str]] | None = None


def default_column_sets() -> dict[str, list[str]]:
    return {
        "release_stories": list(RELEASE_STORY_COLUMNS),
        "missing_stories": list(MISSING_STORY_COLUMNS),
        "change_requests": list(CM_COLUMNS),
        "hotfix_history": list(HISTORY_COLUMNS),
        "bookings": list(BOOKING_COLUMNS),
    }


def load_column_sets(base_path: str | Path | None = None, *, refresh: bool = False) -> dict[str, list[str]]:
    global _CACHE
    if _CACHE is not None and not refresh:
        return _CACHE
    defaults = default_column_sets()
    base = Path(base_path or Path(__file__).resolve().parents[2])
    yaml_path = base / "columns.yaml"
    if not yaml_path.exists():
        _CACHE = defaults
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except yaml.YAMLError:
        logger.warning("Ignoring unreadable column file %s", yaml_path, exc_info=True)
        _CACHE = defaults
        return _CACHE
    sets = data.get("sets") if isinstance(data, dict) else None
    sets = sets if isinstance(sets, dict) else {}
    _CACHE = {name: list(sets.get(name) or cols) for name, cols in defaults.items()}
    return _CACHE


def get_columns(set_name: str) -> list[str]:
    sets = load_column_sets()
    return sets.get(set_name, [])
