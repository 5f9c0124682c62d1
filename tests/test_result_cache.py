"""
Tests for the result cache and its background sweeper.
Time is driven by a fake clock.
"""
import logging
import threading
from unittest.mock import Mock

from cache.result_cache import CacheSweeper, ResultCache
from models import AnalysisOptions, AnalysisResult, ScoreReport


def _result(url: str = "https://example.com/") -> AnalysisResult:
    return AnalysisResult(
        url=url,
        status=200,
        seo=ScoreReport(score=80, level="Excellent", issues=["a"]),
    )


class TestResultCacheFreshness:

    def test_hit_inside_window(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", _result())
        clock.advance(299)
        entry = cache.get("k")
        assert entry is not None
        assert entry.data.url == "https://example.com/"
        assert entry.created_at == 1000.0

    def test_miss_at_window_edge(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", _result())
        clock.advance(300)
        assert cache.get("k") is None

    def test_stale_entry_stays_until_swept(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", _result())
        clock.advance(600)
        assert cache.get("k") is None
        assert cache.size() == 1

    def test_unknown_key(self):
        assert ResultCache().get("missing") is None


class TestResultCacheIsolation:

    def test_mutating_stored_value_does_not_leak(self, clock):
        cache = ResultCache(clock=clock)
        result = _result()
        cache.put("k", result)
        result.seo.issues.append("changed")
        assert cache.get("k").data.seo.issues == ["a"]

    def test_mutating_returned_value_does_not_leak(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", _result())
        cache.get("k").data.seo.issues.clear()
        assert cache.get("k").data.seo.issues == ["a"]


class TestResultCacheEviction:

    def test_oldest_entries_go_first(self, clock):
        cache = ResultCache(max_entries=4, evict_count=2, clock=clock)
        for i in range(5):
            cache.put(f"k{i}", _result())
            clock.advance(1)
        assert cache.keys() == ["k2", "k3", "k4"]

    def test_ceiling_not_exceeded_after_put(self, clock):
        cache = ResultCache(max_entries=4, evict_count=2, clock=clock)
        for i in range(20):
            cache.put(f"k{i}", _result())
            assert cache.size() <= 4

    def test_reput_moves_entry_to_newest(self, clock):
        cache = ResultCache(max_entries=3, evict_count=1, clock=clock)
        for key in ("a", "b", "c"):
            cache.put(key, _result())
        cache.put("a", _result())
        cache.put("d", _result())
        assert cache.keys() == ["c", "a", "d"]

    def test_reput_refreshes_timestamp(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", _result())
        clock.advance(250)
        cache.put("k", _result())
        clock.advance(250)
        assert cache.get("k") is not None


class TestResultCacheMaintenance:

    def test_clear(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("a", _result())
        cache.put("b", _result())
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_sweep_removes_only_old_entries(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("old", _result())
        clock.advance(3000)
        cache.put("new", _result())
        clock.advance(700)
        assert cache.sweep() == 1
        assert cache.keys() == ["new"]

    def test_sweep_empty_cache(self):
        assert ResultCache().sweep() == 0


class TestCacheKeys:

    def test_options_separate_entries(self):
        url = "https://example.com/"
        default = ResultCache.make_key(url, AnalysisOptions())
        no_seo = ResultCache.make_key(url, AnalysisOptions(seo_analysis=False))
        assert default != no_seo
        assert default == ResultCache.make_key(url, AnalysisOptions.from_dict({}))

    def test_url_separates_entries(self):
        options = AnalysisOptions()
        assert ResultCache.make_key("https://a.com/", options) != ResultCache.make_key("https://b.com/", options)


class TestConcurrency:

    def test_parallel_puts_and_gets(self):
        cache = ResultCache(max_entries=50, evict_count=10)
        errors = []

        def worker(n):
            try:
                for i in range(100):
                    key = f"w{n}-{i % 30}"
                    cache.put(key, _result())
                    cache.get(key)
                    cache.size()
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert cache.size() <= 50


class TestCacheSweeper:

    def test_run_once_reports_removed(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", _result())
        clock.advance(4000)
        assert CacheSweeper(cache).run_once() == 1
        assert cache.size() == 0

    def test_run_once_survives_failure(self, caplog):
        cache = Mock()
        cache.sweep.side_effect = RuntimeError("boom")
        sweeper = CacheSweeper(cache)
        with caplog.at_level(logging.ERROR, logger="cache.result_cache"):
            assert sweeper.run_once() == 0
        assert "Cache sweep failed" in caplog.text

    def test_start_and_stop(self):
        sweeper = CacheSweeper(ResultCache(), interval_seconds=60)
        sweeper.start()
        assert sweeper.running
        sweeper.start()
        sweeper.stop(timeout=2)
        assert not sweeper.running

    def test_sweeps_on_interval(self):
        cache = Mock()
        cache.sweep.return_value = 0
        cache.size.return_value = 0
        swept = threading.Event()
        cache.sweep.side_effect = lambda: swept.set() or 0

        sweeper = CacheSweeper(cache, interval_seconds=0.01)
        sweeper.start()
        try:
            assert swept.wait(timeout=2)
        finally:
            sweeper.stop(timeout=2)
