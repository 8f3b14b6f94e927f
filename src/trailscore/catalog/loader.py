"""
Trail catalog and history loaders.

The catalog is a local JSON file (default: `data/catalogs/trails.json`) holding the
trails to rank. Hike history and the recommendation feedback log are JSON lists
as well. Everything is validated into typed Pydantic models so the scoring code can
assume a consistent shape.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from trailscore.core.env import resolve_project_path
from trailscore.domain.models import HikeRecord, RecommendationRecord, Trail

_TRAILS_ADAPTER = TypeAdapter(list[Trail])
_HISTORY_ADAPTER = TypeAdapter(list[HikeRecord])
_FEEDBACK_ADAPTER = TypeAdapter(list[RecommendationRecord])


def _read_json_list(path: str | Path, *, missing_ok: bool) -> list[Any]:
    resolved = resolve_project_path(path)
    if missing_ok and not resolved.exists():
        return []
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON list in {resolved}.")
    return payload


def load_trails(path: str | Path) -> list[Trail]:
    """Load and validate a trail catalog JSON file (catalog order is preserved)."""
    return _TRAILS_ADAPTER.validate_python(_read_json_list(path, missing_ok=False))


def load_history(path: str | Path) -> list[HikeRecord]:
    """Load hike records; a missing file means no history yet."""
    return _HISTORY_ADAPTER.validate_python(_read_json_list(path, missing_ok=True))


def load_feedback(path: str | Path) -> list[RecommendationRecord]:
    """Load the recommendation feedback log; a missing file means no feedback yet."""
    return _FEEDBACK_ADAPTER.validate_python(_read_json_list(path, missing_ok=True))


def save_feedback(path: str | Path, records: list[RecommendationRecord]) -> Path:
    """Write the feedback log (temp file + atomic replace); returns the resolved path."""
    resolved = resolve_project_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    payload = _FEEDBACK_ADAPTER.dump_python(records, mode="json")
    # Unique temp name per writer; os.replace is atomic on the same filesystem.
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=resolved.parent, prefix=f".{resolved.name}.", suffix=".tmp", delete=False
    ) as fh:
        fh.write(json.dumps(payload, ensure_ascii=False, indent=2))
        tmp_name = fh.name
    os.replace(tmp_name, resolved)
    return resolved
