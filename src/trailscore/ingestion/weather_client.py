"""
Weather ingestion client (Hong Kong Observatory open data).

Fetches the `rhrread` (current weather report) dataset and reduces it to the
`WeatherSnapshot` the engine consumes:
- temperature and humidity from the preferred station (first entry otherwise),
- UV index (0 when the observatory publishes none, e.g. at night),
- active warning messages joined into one string,
- a short hiking suggestion derived from the above.

Payloads are cached on disk; an expired copy is served when the API is down.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from trailscore.config.settings import Settings
from trailscore.core.cache import FileCache
from trailscore.core.http import get_json
from trailscore.core.time import align_tz, now_in
from trailscore.domain.models import WeatherSnapshot

logger = logging.getLogger(__name__)

HKO_LANGUAGES = {"en": "en", "zh-Hant": "tc"}

EXTREME_UV_INDEX = 8
HUMID_PERCENT = 85

SUGGESTION_WARNING = "Weather warning in force. Re-plan or carry full rain gear."
SUGGESTION_EXTREME_UV = "Extreme UV. Start pre-dawn and bring SPF/umbrella."
SUGGESTION_HUMID = "Humid conditions. Hydrate frequently and rest more often."
SUGGESTION_STABLE = "Conditions look stable, great time to tackle exposed ridges."


class WeatherUnavailableError(RuntimeError):
    """Raised when no usable weather snapshot can be produced."""


def build_suggestion(*, uv_index: int, humidity: int, has_warning: bool) -> str:
    if has_warning:
        return SUGGESTION_WARNING
    if uv_index >= EXTREME_UV_INDEX:
        return SUGGESTION_EXTREME_UV
    if humidity >= HUMID_PERCENT:
        return SUGGESTION_HUMID
    return SUGGESTION_STABLE


def _pick_station(entries: Any, preferred_place: str) -> dict[str, Any] | None:
    if not isinstance(entries, list):
        return None
    rows = [e for e in entries if isinstance(e, dict) and e.get("value") is not None]
    for row in rows:
        if row.get("place") == preferred_place:
            return row
    return rows[0] if rows else None


def _uv_index(payload: dict[str, Any]) -> int:
    # `uvindex` is a dict during daytime and an empty string otherwise.
    uv = payload.get("uvindex")
    if not isinstance(uv, dict):
        return 0
    for row in uv.get("data") or []:
        if isinstance(row, dict) and row.get("value") is not None:
            try:
                return int(round(float(row["value"])))
            except (TypeError, ValueError):
                continue
    return 0


def _warning_message(payload: dict[str, Any]) -> str | None:
    raw = payload.get("warningMessage")
    if isinstance(raw, str):
        messages = [raw]
    elif isinstance(raw, list):
        messages = [m for m in raw if isinstance(m, str)]
    else:
        messages = []
    messages = [m.strip() for m in messages if m.strip()]
    return "\n".join(messages) if messages else None


def parse_snapshot(
    payload: dict[str, Any], *, preferred_place: str, fallback_time: datetime
) -> WeatherSnapshot:
    """Reduce an `rhrread` payload to a snapshot; raises `WeatherUnavailableError`."""
    temperature = _pick_station((payload.get("temperature") or {}).get("data"), preferred_place)
    humidity = _pick_station((payload.get("humidity") or {}).get("data"), preferred_place)
    if temperature is None or humidity is None:
        raise WeatherUnavailableError("Observatory response is missing temperature/humidity data.")

    try:
        temperature_c = float(temperature["value"])
        humidity_pct = int(round(float(humidity["value"])))
    except (TypeError, ValueError) as e:
        raise WeatherUnavailableError(f"Observatory response has non-numeric readings: {e}") from e

    uv_index = _uv_index(payload)
    warning = _warning_message(payload)

    updated_at = fallback_time
    update_time = payload.get("updateTime")
    if isinstance(update_time, str) and update_time.strip():
        try:
            updated_at = align_tz(datetime.fromisoformat(update_time.strip()), fallback_time)
        except ValueError:
            logger.debug("Ignoring unparseable updateTime %r", update_time)

    return WeatherSnapshot(
        location=str(temperature.get("place") or preferred_place),
        temperature_c=temperature_c,
        humidity=max(0, min(100, humidity_pct)),
        uv_index=uv_index,
        warning_message=warning,
        suggestion=build_suggestion(uv_index=uv_index, humidity=humidity_pct, has_warning=warning is not None),
        updated_at=updated_at,
    )


class WeatherClient:
    """Fetches and caches the observatory report, then parses it into `WeatherSnapshot`."""

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    def _fetch_rhrread(self, lang: str) -> dict[str, Any]:
        """Call the observatory API and return the raw JSON response as a dict."""
        cfg = self._settings.ingestion.weather
        payload = get_json(
            cfg.base_url,
            params={"dataType": cfg.data_type, "lang": lang},
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        if not isinstance(payload, dict):
            raise ValueError("Unexpected observatory response shape; expected an object.")
        return payload

    def get_snapshot(self, language: str = "en") -> WeatherSnapshot:
        """Return the current snapshot for `language` (cached, stale-if-error)."""
        lang = HKO_LANGUAGES.get(language)
        if lang is None:
            raise ValueError(f"Unsupported language '{language}'. Expected one of: {', '.join(HKO_LANGUAGES)}")

        cfg = self._settings.ingestion.weather
        cache_key = f"hko:{cfg.data_type}:{lang}"

        def builder() -> dict[str, Any]:
            logger.info("Fetching observatory weather (%s, lang=%s)", cfg.data_type, lang)
            return self._fetch_rhrread(lang)

        try:
            payload = self._cache.get_or_set(
                "weather",
                cache_key,
                builder,
                ttl_seconds=int(cfg.cache_ttl_seconds),
                stale_if_error=True,
            )
        except (httpx.HTTPError, ValueError) as e:
            raise WeatherUnavailableError(f"Observatory weather unavailable: {e}") from e

        return parse_snapshot(
            payload,
            preferred_place=cfg.preferred_place,
            fallback_time=now_in(self._settings.app.timezone),
        )
