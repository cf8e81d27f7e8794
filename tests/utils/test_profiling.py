"""Tests for the performance profiler."""

import logging

import pytest

from visualmapper.utils.profiling import PerformanceProfiler, profile_block, timed


class TestProfiler:

    def test_shared_instance(self):
        assert PerformanceProfiler.get_instance() is PerformanceProfiler.get_instance()
        assert PerformanceProfiler() is not PerformanceProfiler.get_instance()

    def test_timed_records_result(self):
        @timed("unit_op")
        def work():
            return 42

        assert work() == 42
        summary = PerformanceProfiler.get_instance().get_summary()
        assert summary["unit_op"]["count"] == 1
        assert summary["unit_op"]["target_ms"] is None

    def test_failure_is_recorded_and_reraised(self):
        profiler = PerformanceProfiler.get_instance()
        with pytest.raises(RuntimeError):
            with profile_block("failing_op"):
                raise RuntimeError("boom")
        assert profiler.results[-1].success is False
        assert profiler.get_summary()["failing_op"]["failures"] == 1

    def test_stop_without_start_warns(self, caplog):
        profiler = PerformanceProfiler()
        with caplog.at_level(logging.WARNING, logger="visualmapper.profiling"):
            assert profiler.stop("never_started") is None
        assert "never_started" in caplog.text

    def test_history_is_bounded_but_totals_are_not(self):
        profiler = PerformanceProfiler(max_results=5)
        for _ in range(12):
            with profiler.measure("loop"):
                pass
        assert len(profiler.results) == 5
        assert profiler.stats["loop"].count == 12

    def test_disabled(self):
        profiler = PerformanceProfiler()
        profiler.enabled = False
        with profiler.measure("skipped"):
            pass
        assert profiler.get_summary() == {}

    def test_log_summary(self, caplog):
        profiler = PerformanceProfiler()
        with profiler.measure("snap_query"):
            pass
        with caplog.at_level(logging.INFO, logger="visualmapper.profiling"):
            profiler.log_summary()
        assert "snap_query: 1 calls" in caplog.text

    def test_empty_summary(self):
        assert PerformanceProfiler.get_instance().get_summary() == {}
