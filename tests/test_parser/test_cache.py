"""Tests for the extraction cache (viewscaffold.parser.cache).

Time, file modification times and sweep scheduling are all faked; nothing
here sleeps or touches the real file system.
"""

from __future__ import annotations

import pytest

from viewscaffold.config import CacheConfig
from viewscaffold.parser import cache as cache_module
from viewscaffold.parser.cache import ExtractionCache, ThreadSweepScheduler
from viewscaffold.parser.models import InputKind, ModelProperty


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit

PATH = "/src/Shop/Models/Product.cs"


@pytest.fixture
def props() -> list[ModelProperty]:
    return [
        ModelProperty(name="Id", declared_type="int", is_primary_key=True, input_kind=InputKind.NUMBER),
        ModelProperty(name="Name", declared_type="string"),
    ]


# ---------------------------------------------------------------------------
# get / set
# ---------------------------------------------------------------------------


class TestGetSet:
    def test_hit_returns_identical_sequence(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        assert cache.get("Shop.Models.Product", PATH) == props

    def test_hit_returns_fresh_list(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        first = cache.get("Shop.Models.Product", PATH)
        first.clear()
        assert cache.get("Shop.Models.Product", PATH) == props

    def test_caller_list_not_aliased(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        props.pop()
        assert len(cache.get("Shop.Models.Product", PATH)) == 2

    def test_miss_for_unknown_type(self, cache, fake_stat):
        fake_stat.mtimes[PATH] = 10.0
        assert cache.get("Shop.Models.Order", PATH) is None

    def test_newer_mtime_is_a_miss_and_evicts(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        fake_stat.mtimes[PATH] = 11.0
        assert cache.get("Shop.Models.Product", PATH) is None
        assert "Shop.Models.Product" not in cache

    def test_older_or_equal_mtime_is_a_hit(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        fake_stat.mtimes[PATH] = 9.0
        assert cache.get("Shop.Models.Product", PATH) == props

    def test_unreadable_file_is_a_miss_and_evicts(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        del fake_stat.mtimes[PATH]
        assert cache.get("Shop.Models.Product", PATH) is None
        assert cache.size == 0

    def test_set_with_unreadable_file_caches_nothing(self, cache, props):
        cache.set("Shop.Models.Product", PATH, props)
        assert cache.size == 0

    def test_set_with_unreadable_file_drops_old_entry(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        del fake_stat.mtimes[PATH]
        cache.set("Shop.Models.Product", PATH, props)
        assert "Shop.Models.Product" not in cache

    def test_entry_records_stamps(self, cache, fake_stat, fake_clock, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        entry = cache.entry("Shop.Models.Product")
        assert entry.source_file_path == PATH
        assert entry.last_modified_at == 10.0
        assert entry.cached_at == fake_clock.now
        assert entry.properties == tuple(props)

    def test_empty_result_is_cached(self, cache, fake_stat):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Marker", PATH, [])
        assert cache.get("Shop.Models.Marker", PATH) == []


# ---------------------------------------------------------------------------
# Expiration
# ---------------------------------------------------------------------------


class TestExpiration:
    def test_entry_valid_until_window_passes(self, cache, fake_stat, fake_clock, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        fake_clock.advance(300)
        assert cache.get("Shop.Models.Product", PATH) == props

    def test_entry_expires_after_window(self, cache, fake_stat, fake_clock, props):
        fake_stat.mtimes[PATH] = 10.0
        cache.set("Shop.Models.Product", PATH, props)
        fake_clock.advance(300.5)
        assert cache.get("Shop.Models.Product", PATH) is None
        assert cache.size == 0

    def test_age_measured_from_caching_not_from_mtime(self, cache, fake_stat, props):
        fake_stat.mtimes[PATH] = 0.0
        cache.set("Shop.Models.Product", PATH, props)
        assert cache.get("Shop.Models.Product", PATH) == props


# ---------------------------------------------------------------------------
# Bounds & management
# ---------------------------------------------------------------------------


class TestBounds:
    def _fill(self, cache, fake_stat, names):
        for name in names:
            path = f"/src/{name}.cs"
            fake_stat.mtimes[path] = 1.0
            cache.set(name, path, [])

    def test_oldest_inserted_evicted_at_bound(self, cache, fake_stat):
        self._fill(cache, fake_stat, ["A", "B", "C", "D"])
        assert cache.size == 3
        assert "A" not in cache
        assert all(name in cache for name in ("B", "C", "D"))

    def test_reads_do_not_refresh_order(self, cache, fake_stat):
        self._fill(cache, fake_stat, ["A", "B", "C"])
        assert cache.get("A", "/src/A.cs") == []
        self._fill(cache, fake_stat, ["D"])
        assert "A" not in cache

    def test_replacing_existing_key_does_not_evict(self, cache, fake_stat):
        self._fill(cache, fake_stat, ["A", "B", "C"])
        self._fill(cache, fake_stat, ["B"])
        assert len(cache) == 3
        assert "A" in cache

    def test_delete(self, cache, fake_stat):
        self._fill(cache, fake_stat, ["A"])
        assert cache.delete("A") is True
        assert cache.delete("A") is False
        assert cache.size == 0

    def test_clear(self, cache, fake_stat):
        self._fill(cache, fake_stat, ["A", "B"])
        cache.clear()
        assert cache.size == 0

    @pytest.mark.parametrize("kwargs", [{"max_entries": 0}, {"expiration_seconds": 0}])
    def test_invalid_bounds(self, kwargs):
        with pytest.raises(ValueError):
            ExtractionCache(**kwargs)


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


class TestSweep:
    def test_sweep_removes_only_expired(self, cache, fake_stat, fake_clock):
        fake_stat.mtimes["/a.cs"] = 1.0
        fake_stat.mtimes["/b.cs"] = 1.0
        cache.set("A", "/a.cs", [])
        fake_clock.advance(200)
        cache.set("B", "/b.cs", [])
        fake_clock.advance(150)

        assert cache.sweep() == 1
        assert "A" not in cache
        assert "B" in cache

    def test_sweep_does_not_stat_files(self, cache, fake_stat, fake_clock):
        fake_stat.mtimes["/a.cs"] = 1.0
        cache.set("A", "/a.cs", [])
        calls = fake_stat.calls
        fake_clock.advance(301)
        cache.sweep()
        assert fake_stat.calls == calls

    def test_start_sweeper_schedules_once(self, cache, fake_scheduler):
        first = cache.start_sweeper(60, fake_scheduler)
        second = cache.start_sweeper(60, fake_scheduler)
        assert first is second
        assert len(fake_scheduler.scheduled) == 1
        assert fake_scheduler.scheduled[0][0] == 60

    def test_scheduled_tick_sweeps(self, cache, fake_stat, fake_clock, fake_scheduler):
        fake_stat.mtimes["/a.cs"] = 1.0
        cache.set("A", "/a.cs", [])
        cache.start_sweeper(60, fake_scheduler)
        fake_clock.advance(301)
        assert fake_scheduler.tick() == [1]
        assert cache.size == 0

    def test_stop_sweeper_cancels(self, cache, fake_scheduler):
        cache.start_sweeper(60, fake_scheduler)
        cache.stop_sweeper()
        assert fake_scheduler.scheduled[0][2].cancelled
        assert fake_scheduler.tick() == []

    def test_thread_scheduler_handle_cancels(self):
        handle = ThreadSweepScheduler().schedule(3600, lambda: None)
        handle.cancel()
        handle._thread.join(timeout=1)
        assert not handle._thread.is_alive()


# ---------------------------------------------------------------------------
# Process-wide cache
# ---------------------------------------------------------------------------


class TestDefaultCache:
    @pytest.fixture(autouse=True)
    def _isolate(self, monkeypatch):
        monkeypatch.setattr(cache_module, "_default_cache", None)
        yield
        if cache_module._default_cache is not None:
            cache_module._default_cache.stop_sweeper()

    def test_get_default_cache_is_shared(self):
        assert cache_module.get_default_cache() is cache_module.get_default_cache()

    def test_default_bounds(self):
        shared = cache_module.get_default_cache()
        assert shared.max_entries == 100
        assert shared.expiration_seconds == 300

    def test_configure_replaces_instance(self):
        old = cache_module.get_default_cache()
        new = cache_module.configure_default_cache(CacheConfig(max_entries=5, expiration_seconds=10))
        assert new is not old
        assert new.max_entries == 5
        assert cache_module.get_default_cache() is new
