import httpx
import pytest

from trailscore.core.cache import FileCache
from trailscore.ingestion import weather_client as wc
from trailscore.ingestion.weather_client import WeatherClient, WeatherUnavailableError, build_suggestion


def _payload(**overrides):
    payload = {
        "temperature": {
            "data": [
                {"place": "King's Park", "value": 24, "unit": "C"},
                {"place": "Hong Kong Observatory", "value": 26, "unit": "C"},
            ]
        },
        "humidity": {"data": [{"place": "Hong Kong Observatory", "value": 78, "unit": "percent"}]},
        "uvindex": {"data": [{"place": "King's Park", "value": 5, "desc": "moderate"}]},
        "warningMessage": "",
        "updateTime": "2026-01-05T12:02:00+08:00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def client(settings, tmp_path):
    return WeatherClient(settings, FileCache(tmp_path / "cache"))


def test_snapshot_prefers_observatory_station(monkeypatch, client):
    calls = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=10):
        calls.append(params)
        return _payload()

    monkeypatch.setattr(wc, "get_json", fake_get_json)
    snap = client.get_snapshot("zh-Hant")

    assert calls == [{"dataType": "rhrread", "lang": "tc"}]
    assert snap.location == "Hong Kong Observatory"
    assert snap.temperature_c == 26
    assert snap.humidity == 78
    assert snap.uv_index == 5
    assert snap.warning_message is None
    assert snap.suggestion == wc.SUGGESTION_STABLE
    assert snap.updated_at.isoformat() == "2026-01-05T12:02:00+08:00"


def test_snapshot_falls_back_to_first_station_and_handles_empty_uv(monkeypatch, client):
    payload = _payload(
        temperature={"data": [{"place": "Sha Tin", "value": 19}]},
        humidity={"data": [{"place": "Sha Tin", "value": 90}]},
        uvindex="",
    )
    monkeypatch.setattr(wc, "get_json", lambda *a, **k: payload)
    snap = client.get_snapshot("en")

    assert snap.location == "Sha Tin"
    assert snap.uv_index == 0
    assert snap.suggestion == wc.SUGGESTION_HUMID


def test_warning_messages_are_joined(monkeypatch, client):
    payload = _payload(warningMessage=["Thunderstorm Warning", "  ", "Strong Monsoon Signal"])
    monkeypatch.setattr(wc, "get_json", lambda *a, **k: payload)
    snap = client.get_snapshot("en")

    assert snap.warning_message == "Thunderstorm Warning\nStrong Monsoon Signal"
    assert snap.suggestion == wc.SUGGESTION_WARNING


def test_responses_are_cached(monkeypatch, client):
    calls = []

    def fake_get_json(*a, **k):
        calls.append(1)
        return _payload()

    monkeypatch.setattr(wc, "get_json", fake_get_json)
    client.get_snapshot("en")
    client.get_snapshot("en")
    assert len(calls) == 1


def test_http_failure_without_cache_raises(monkeypatch, client):
    def boom(*a, **k):
        raise httpx.ConnectError("observatory down")

    monkeypatch.setattr(wc, "get_json", boom)
    with pytest.raises(WeatherUnavailableError):
        client.get_snapshot("en")


def test_http_failure_serves_stale_payload(monkeypatch, client):
    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 0)
    monkeypatch.setattr(wc, "get_json", lambda *a, **k: _payload())
    client.get_snapshot("en")

    def boom(*a, **k):
        raise httpx.ConnectError("observatory down")

    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 100_000)
    monkeypatch.setattr(wc, "get_json", boom)
    assert client.get_snapshot("en").temperature_c == 26


def test_missing_readings_raise(monkeypatch, client):
    monkeypatch.setattr(wc, "get_json", lambda *a, **k: _payload(temperature={"data": []}))
    with pytest.raises(WeatherUnavailableError, match="temperature/humidity"):
        client.get_snapshot("en")


def test_unsupported_language(client):
    with pytest.raises(ValueError):
        client.get_snapshot("fr")


@pytest.mark.parametrize(
    "uv,humidity,warning,expected",
    [
        (9, 90, True, wc.SUGGESTION_WARNING),
        (8, 90, False, wc.SUGGESTION_EXTREME_UV),
        (7, 85, False, wc.SUGGESTION_HUMID),
        (7, 84, False, wc.SUGGESTION_STABLE),
    ],
)
def test_build_suggestion_priority(uv, humidity, warning, expected):
    assert build_suggestion(uv_index=uv, humidity=humidity, has_warning=warning) == expected
