"""
Simple on-disk JSON cache.

Stores JSON-serializable values under `.cache/trailscore/` by default. Keys are
hashed (SHA-256) so arbitrary strings are safe file names, and TTL is enforced on
read. The weather client uses it to avoid hammering the observatory API and to
serve the last good payload when the API is down (stale-if-error).
"""

from __future__ import annotations

import json
import logging
import time
from hashlib import sha256
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


class FileCache:
    """A filesystem-backed cache keyed by (namespace, key)."""

    def __init__(self, base_dir: Path, enabled: bool = True, default_ttl_seconds: int = 3600):
        self._base_dir = Path(base_dir)
        self._enabled = enabled
        self._default_ttl_seconds = default_ttl_seconds

    def _key_path(self, namespace: str, key: str) -> Path:
        digest = sha256(f"{namespace}:{key}".encode("utf-8")).hexdigest()
        return self._base_dir / namespace / f"{digest}.json"

    def _read_envelope(self, namespace: str, key: str) -> dict[str, Any] | None:
        path = self._key_path(namespace, key)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable cache entry %s", path)
            return None
        if not isinstance(raw, dict) or "value" not in raw:
            return None
        return raw

    def get(self, namespace: str, key: str, ttl_seconds: int | None = None) -> Any | None:
        """Read a cached value if present and not expired; otherwise return None."""
        if not self._enabled:
            return None
        raw = self._read_envelope(namespace, key)
        if raw is None:
            return None
        ttl = ttl_seconds if ttl_seconds is not None else int(raw.get("ttl_seconds", 0))
        if int(time.time()) - int(raw.get("created_at_unix", 0)) > ttl:
            return None
        return raw["value"]

    def get_stale(self, namespace: str, key: str) -> Any | None:
        """Read a cached value even if expired (for stale-if-error fallbacks)."""
        if not self._enabled:
            return None
        raw = self._read_envelope(namespace, key)
        return raw["value"] if raw is not None else None

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Write a JSON-serializable value (temp file + atomic replace)."""
        if not self._enabled:
            return None
        path = self._key_path(namespace, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "created_at_unix": int(time.time()),
            "ttl_seconds": int(ttl_seconds if ttl_seconds is not None else self._default_ttl_seconds),
            "value": value,
        }
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)

    def get_or_set(
        self,
        namespace: str,
        key: str,
        builder: Callable[[], Any],
        ttl_seconds: int | None = None,
        *,
        stale_if_error: bool = False,
    ) -> Any:
        """Return the cached value, or compute and store it via `builder`.

        With `stale_if_error`, a failing `builder()` falls back to an expired entry
        when one exists; otherwise the builder's exception propagates.
        """
        cached = self.get(namespace, key, ttl_seconds=ttl_seconds)
        if cached is not None:
            return cached
        try:
            value = builder()
        except Exception:
            if stale_if_error:
                stale = self.get_stale(namespace, key)
                if stale is not None:
                    logger.warning("Serving stale cache entry for %s:%s", namespace, key)
                    return stale
            raise
        self.set(namespace, key, value, ttl_seconds=ttl_seconds)
        return value
