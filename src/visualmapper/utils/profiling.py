"""
Timing utilities for the geometry core.

Interactive operations (snapping, overlap resolution) run on every pointer
move, so they have tight budgets; exports get a looser one.
"""

import time
import functools
import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Optional

logger = logging.getLogger("visualmapper.profiling")

# Milliseconds
TARGETS = {
    "snap_query": 5,
    "snap_correction": 5,
    "resolve_overlaps": 16,
    "axis_generation": 5,
    "dxf_export": 1000,
    "geojson_export": 1000,
}


@dataclass
class TimingResult:
    """One timed call."""
    operation: str
    duration_ms: float
    timestamp: float
    success: bool = True
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationStats:
    """Running totals for one operation name."""
    count: int = 0
    failures: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    def add(self, result: TimingResult):
        self.count += 1
        self.total_ms += result.duration_ms
        self.min_ms = min(self.min_ms, result.duration_ms)
        self.max_ms = max(self.max_ms, result.duration_ms)
        if not result.success:
            self.failures += 1

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


class PerformanceProfiler:
    """
    Collects timing data for named operations.

    Only the last ``max_results`` calls are kept individually; the per
    operation totals in ``stats`` cover every call since the last ``clear``.
    """

    _shared: Optional["PerformanceProfiler"] = None

    def __init__(self, max_results: int = 1000):
        self.enabled = True
        self.results: Deque[TimingResult] = deque(maxlen=max_results)
        self.stats: Dict[str, OperationStats] = {}
        self._pending: Dict[str, float] = {}

    @classmethod
    def get_instance(cls) -> "PerformanceProfiler":
        """Profiler shared by ``timed`` and ``profile_block``."""
        if cls._shared is None:
            cls._shared = cls()
        return cls._shared

    @property
    def max_results(self) -> int:
        return self.results.maxlen

    @max_results.setter
    def max_results(self, value: int):
        self.results = deque(self.results, maxlen=value)

    def start(self, operation: str):
        if self.enabled:
            self._pending[operation] = time.perf_counter()

    def stop(self, operation: str, success: bool = True, **details) -> Optional[TimingResult]:
        """Finish timing ``operation`` and record it."""
        if not self.enabled:
            return None

        started = self._pending.pop(operation, None)
        if started is None:
            logger.warning(f"stop() called for {operation} without a matching start()")
            return None

        result = TimingResult(
            operation=operation,
            duration_ms=(time.perf_counter() - started) * 1000,
            timestamp=time.time(),
            success=success,
            details=details,
        )
        self.results.append(result)
        self.stats.setdefault(operation, OperationStats()).add(result)
        self._check_target(result)
        return result

    def _check_target(self, result: TimingResult):
        target = TARGETS.get(result.operation)
        if target is not None and result.duration_ms > target:
            logger.warning(f"{result.operation} took {result.duration_ms:.1f}ms "
                           f"(target {target}ms)")
        else:
            logger.debug(f"{result.operation}: {result.duration_ms:.1f}ms")

    @contextmanager
    def measure(self, operation: str, **details):
        self.start(operation)
        success = True
        try:
            yield
        except Exception:
            success = False
            raise
        finally:
            self.stop(operation, success=success, **details)

    def get_summary(self) -> Dict[str, Dict[str, Any]]:
        """Per-operation count, failures, average, min, max and target status."""
        summary = {}
        for operation, stats in self.stats.items():
            target = TARGETS.get(operation)
            summary[operation] = {
                "count": stats.count,
                "failures": stats.failures,
                "avg_ms": round(stats.avg_ms, 2),
                "min_ms": round(stats.min_ms, 2),
                "max_ms": round(stats.max_ms, 2),
                "target_ms": target,
                "meets_target": stats.avg_ms <= target if target else None,
            }
        return summary

    def log_summary(self, level: int = logging.INFO):
        for operation, row in sorted(self.get_summary().items()):
            logger.log(level, f"{operation}: {row['count']} calls, "
                              f"avg {row['avg_ms']:.2f}ms, max {row['max_ms']:.2f}ms")

    def clear(self):
        self.results.clear()
        self.stats.clear()
        self._pending.clear()


def timed(operation: str = None):
    """
    Record every call of the decorated function under ``operation``.

    Usage:
        @timed("resolve_overlaps")
        def resolve_all_overlaps(moving, statics):
            ...
    """
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with PerformanceProfiler.get_instance().measure(name):
                return func(*args, **kwargs)

        return wrapper
    return decorator


def profile_block(operation: str):
    """
    Time a ``with`` block on the shared profiler.

        with profile_block("dxf_export"):
            content = exporter.build(sheet)
    """
    return PerformanceProfiler.get_instance().measure(operation)
