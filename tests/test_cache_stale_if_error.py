import pytest

from trailscore.core.cache import FileCache


def test_file_cache_stale_if_error_returns_expired_value(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=1)

    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 0)
    cache.set("ns", "k", {"v": 1}, ttl_seconds=1)

    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 100)

    def builder():
        raise RuntimeError("upstream down")

    val = cache.get_or_set("ns", "k", builder, ttl_seconds=1, stale_if_error=True)
    assert val == {"v": 1}


def test_file_cache_without_stale_if_error_propagates(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=1)

    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 0)
    cache.set("ns", "k", {"v": 1}, ttl_seconds=1)

    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 100)

    def builder():
        raise RuntimeError("upstream down")

    with pytest.raises(RuntimeError):
        cache.get_or_set("ns", "k", builder, ttl_seconds=1)


def test_file_cache_returns_fresh_value_without_calling_builder(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=60)
    monkeypatch.setattr("trailscore.core.cache.time.time", lambda: 0)
    cache.set("ns", "k", [1, 2])

    def builder():
        raise AssertionError("should not be called")

    assert cache.get_or_set("ns", "k", builder) == [1, 2]


def test_disabled_cache_always_builds(tmp_path):
    cache = FileCache(tmp_path, enabled=False)
    calls = []

    def builder():
        calls.append(1)
        return {"n": len(calls)}

    assert cache.get_or_set("ns", "k", builder) == {"n": 1}
    assert cache.get_or_set("ns", "k", builder) == {"n": 2}
    assert not any(tmp_path.iterdir())
