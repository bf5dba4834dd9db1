from __future__ import annotations

import threading

from restex import ResponseCache


class _FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def test_entry_is_served_until_ttl_elapses():
    clock = _FakeClock()
    cache = ResponseCache(clock=clock)
    cache.put("F1", {"id": 1}, ttl_s=5.0)

    clock.now = 4.999
    assert cache.get("F1") == {"id": 1}

    clock.now = 5.0
    assert cache.get("F1") is None
    assert len(cache) == 0


def test_missing_key_returns_default():
    cache = ResponseCache(clock=_FakeClock())
    sentinel = object()

    assert cache.get("nope") is None
    assert cache.get("nope", sentinel) is sentinel


def test_cached_none_is_distinguishable_from_miss():
    cache = ResponseCache(clock=_FakeClock())
    sentinel = object()
    cache.put("F1", None, ttl_s=10.0)

    assert cache.get("F1", sentinel) is None
    assert "F1" in cache


def test_disabling_hides_entries_without_deleting_them():
    cache = ResponseCache(clock=_FakeClock())
    cache.put("F1", "v1", ttl_s=10.0)

    cache.set_enabled(False)
    assert cache.enabled is False
    assert cache.get("F1") is None
    cache.put("F2", "v2", ttl_s=10.0)

    cache.set_enabled(True)
    assert cache.get("F1") == "v1"
    assert cache.get("F2") is None


def test_clear_drops_everything():
    cache = ResponseCache(clock=_FakeClock())
    cache.put("F1", "v1", ttl_s=10.0)
    cache.put("F2", "v2", ttl_s=10.0)

    cache.clear()

    assert len(cache) == 0
    assert cache.get("F1") is None


def test_put_replaces_existing_entry_and_restarts_ttl():
    clock = _FakeClock()
    cache = ResponseCache(clock=clock)
    cache.put("F1", "old", ttl_s=5.0)

    clock.now = 4.0
    cache.put("F1", "new", ttl_s=5.0)

    clock.now = 8.0
    assert cache.get("F1") == "new"


def test_non_positive_ttl_is_not_stored():
    cache = ResponseCache(clock=_FakeClock())
    cache.put("F1", "v", ttl_s=0)

    assert len(cache) == 0


def test_capacity_evicts_expired_rows_before_live_ones():
    clock = _FakeClock()
    cache = ResponseCache(max_entries=2, clock=clock)
    cache.put("short", 1, ttl_s=1.0)
    cache.put("long", 2, ttl_s=100.0)

    clock.now = 2.0
    cache.put("newest", 3, ttl_s=100.0)

    assert cache.get("long") == 2
    assert cache.get("newest") == 3
    assert len(cache) == 2


def test_capacity_evicts_oldest_live_row():
    cache = ResponseCache(max_entries=2, clock=_FakeClock())
    cache.put("a", 1, ttl_s=100.0)
    cache.put("b", 2, ttl_s=100.0)
    cache.put("c", 3, ttl_s=100.0)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_purge_expired_reports_count():
    clock = _FakeClock()
    cache = ResponseCache(clock=clock)
    cache.put("a", 1, ttl_s=1.0)
    cache.put("b", 2, ttl_s=1.0)
    cache.put("c", 3, ttl_s=10.0)

    clock.now = 5.0
    assert cache.purge_expired() == 2
    assert len(cache) == 1


def test_concurrent_writers_never_expose_partial_entries():
    cache = ResponseCache(max_entries=64, clock=_FakeClock())
    errors: list[str] = []

    def _writer(worker: int) -> None:
        for i in range(200):
            cache.put(f"k{i % 8}", (worker, i), ttl_s=10.0)

    def _reader() -> None:
        for i in range(800):
            value = cache.get(f"k{i % 8}")
            if value is not None and (not isinstance(value, tuple) or len(value) != 2):
                errors.append(repr(value))

    threads = [threading.Thread(target=_writer, args=(n,)) for n in range(4)]
    threads += [threading.Thread(target=_reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert errors == []
    assert len(cache) == 8
