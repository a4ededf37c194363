"""
colorgen Metrics Collection
In-process metrics collection for monitoring and performance tracking.
"""
import time
from collections import Counter, defaultdict
from contextlib import contextmanager
from threading import Lock
from typing import Any, Dict, List, Optional

from loguru import logger


class MetricsCollector:
    """Simple in-process metrics collector."""

    def __init__(self):
        """Initialize metrics collector."""
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._cluster_counts: List[int] = []
        self._start_time = time.time()

    def increment_request_count(self, source: str):
        """Increment request counters for a seed source ("color" or "image")."""
        with self._lock:
            self._counters["scheme_requests_total"] += 1
            self._counters[f"scheme_source_total_{source}"] += 1

    def increment_failure_count(self, error_type: str):
        """Increment failure counter by error type."""
        with self._lock:
            self._counters[f"scheme_failed_total_{error_type}"] += 1

    def record_timing(self, operation: str, duration_ms: float):
        """Record timing for an operation."""
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def record_cluster_count(self, count: int):
        """Record how many colors a quantization run produced."""
        with self._lock:
            self._cluster_counts.append(count)

    def get_counters(self) -> Dict[str, int]:
        """Get current counter values."""
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Get timing statistics."""
        with self._lock:
            stats = {}
            for operation, timings in self._timings.items():
                if timings:
                    stats[operation] = {
                        "count": len(timings),
                        "mean": sum(timings) / len(timings),
                        "min": min(timings),
                        "max": max(timings),
                        "p50": self._percentile(timings, 50),
                        "p95": self._percentile(timings, 95)
                    }
            return stats

    def get_cluster_count_stats(self) -> Dict[str, float]:
        """Get quantizer output size statistics."""
        with self._lock:
            if not self._cluster_counts:
                return {}
            return {
                "count": len(self._cluster_counts),
                "mean": sum(self._cluster_counts) / len(self._cluster_counts),
                "min": min(self._cluster_counts),
                "max": max(self._cluster_counts),
            }

    def get_uptime_seconds(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get complete metrics summary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "cluster_count_stats": self.get_cluster_count_stats()
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._cluster_counts.clear()
            self._start_time = time.time()

    @staticmethod
    def _percentile(data: List[float], percentile: int) -> float:
        """Calculate percentile of data."""
        if not data:
            return 0.0

        sorted_data = sorted(data)
        k = (len(sorted_data) - 1) * percentile / 100
        f = int(k)
        c = k - f

        if f + 1 < len(sorted_data):
            return sorted_data[f] + c * (sorted_data[f + 1] - sorted_data[f])
        else:
            return sorted_data[f]


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    get_metrics().reset()


@contextmanager
def performance_monitor(operation_name: str, **fields):
    """Context manager that times a pipeline stage and records it."""
    start_time = time.time()
    error_msg = None

    try:
        yield
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.time() - start_time) * 1000
        get_metrics().record_timing(operation_name, duration_ms)

        if error_msg:
            logger.bind(**fields).error(f"Operation {operation_name} failed after {duration_ms:.1f}ms: {error_msg}")
        else:
            logger.bind(**fields).info(f"Operation {operation_name} completed in {duration_ms:.1f}ms")
