"""
Observability metrics for the Paleta extraction and palette pipeline.

Records per-operation timing, memory and CPU figures in a process-wide
collector and logs stage progress for a single extraction run.
"""

import itertools
import threading
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from dataclasses import dataclass, asdict, field
from functools import wraps
from typing import Dict, Any, Optional, List

import numpy as np
import psutil
from loguru import logger


@dataclass
class PerformanceMetrics:
    """Performance metrics for one monitored operation."""
    operation_name: str
    duration_ms: float
    memory_usage_mb: float
    cpu_percent: float
    pixel_count: int
    cluster_count: int
    timestamp: float
    error: Optional[str] = None


@dataclass
class ExtractionMetrics:
    """Summary of one dominant-color extraction run."""
    extraction_id: str
    total_duration_ms: float
    sampling_duration_ms: float
    clustering_duration_ms: float
    distinct_duration_ms: float
    positions_duration_ms: float

    image_size: tuple
    sampled_pixel_count: int
    cluster_count: int
    fallback_used: bool

    warnings: List[str] = field(default_factory=list)


class MetricsCollector:
    """Thread-safe metrics collector for Paleta operations."""

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self._lock = threading.Lock()
        self._metrics_history: deque = deque(maxlen=max_history)
        self._operation_counts = defaultdict(int)
        self._error_counts = defaultdict(int)
        self._durations = defaultdict(lambda: deque(maxlen=100))

    def record_performance(self, metrics: PerformanceMetrics) -> None:
        """Record performance metrics for an operation."""
        with self._lock:
            self._metrics_history.append(metrics)
            self._operation_counts[metrics.operation_name] += 1
            if metrics.error:
                self._error_counts[metrics.operation_name] += 1
            self._durations[metrics.operation_name].append(metrics.duration_ms)

    def _stats_locked(self, operation_name: str) -> Dict[str, Any]:
        durations = list(self._durations.get(operation_name, ()))
        if not durations:
            return {}

        calls = self._operation_counts[operation_name]
        return {
            'operation_name': operation_name,
            'total_calls': calls,
            'error_count': self._error_counts[operation_name],
            'error_rate': self._error_counts[operation_name] / max(1, calls),
            'duration_stats': {
                'mean_ms': float(np.mean(durations)),
                'median_ms': float(np.median(durations)),
                'p95_ms': float(np.percentile(durations, 95)),
                'min_ms': float(np.min(durations)),
                'max_ms': float(np.max(durations))
            }
        }

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """Get aggregated statistics for a specific operation."""
        with self._lock:
            return self._stats_locked(operation_name)

    def get_all_stats(self) -> Dict[str, Any]:
        """Get aggregated statistics for all operations."""
        with self._lock:
            total = sum(self._operation_counts.values())
            errors = sum(self._error_counts.values())
            return {
                'operations': {name: self._stats_locked(name) for name in self._operation_counts},
                'total_operations': total,
                'total_errors': errors,
                'overall_error_rate': errors / max(1, total)
            }

    def get_recent_metrics(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Get the most recent performance metrics."""
        with self._lock:
            return [asdict(metric) for metric in list(self._metrics_history)[-limit:]]

    def reset(self) -> None:
        """Drop all recorded metrics."""
        with self._lock:
            self._metrics_history.clear()
            self._operation_counts.clear()
            self._error_counts.clear()
            self._durations.clear()


# Global metrics collector instance
_metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    return _metrics_collector


def reset_metrics() -> None:
    """Reset the global metrics collector."""
    _metrics_collector.reset()


@contextmanager
def performance_monitor(operation_name: str, pixel_count: int = 0, cluster_count: int = 0):
    """Context manager for monitoring performance of operations."""
    process = psutil.Process()
    start_time = time.perf_counter()
    start_memory = process.memory_info().rss / 1024 / 1024  # MB
    start_cpu = psutil.cpu_percent()

    error_msg = None

    try:
        yield
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        end_memory = process.memory_info().rss / 1024 / 1024  # MB

        metrics = PerformanceMetrics(
            operation_name=operation_name,
            duration_ms=duration_ms,
            memory_usage_mb=max(end_memory, start_memory),
            cpu_percent=max(psutil.cpu_percent(), start_cpu),
            pixel_count=pixel_count,
            cluster_count=cluster_count,
            timestamp=time.time(),
            error=error_msg
        )

        _metrics_collector.record_performance(metrics)

        if error_msg:
            logger.error(f"Operation {operation_name} failed after {duration_ms:.1f}ms: {error_msg}")
        else:
            logger.debug(f"Operation {operation_name} completed in {duration_ms:.1f}ms "
                         f"(memory: {metrics.memory_usage_mb:.1f}MB)")


def performance_tracked(operation_name: str):
    """Decorator for automatically tracking function performance."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with performance_monitor(operation_name):
                return func(*args, **kwargs)
        return wrapper
    return decorator


_extraction_ids = itertools.count(1)


class ExtractionLogger:
    """Stage timings and warnings for a single extraction run."""

    def __init__(self, image_size: tuple):
        self.extraction_id = f"extraction_{next(_extraction_ids)}"
        self.image_size = image_size
        self.start_time = time.perf_counter()
        self.stages: Dict[str, Dict[str, Any]] = {}
        self.warnings: List[str] = []

        logger.info(f"Starting color extraction {self.extraction_id} (image: {image_size})")

    @contextmanager
    def stage(self, stage_name: str, **details):
        """
        Time a pipeline stage and record it under `stage_name`.

        Yields the details dict so the stage body can add figures that are
        only known once it has run.
        """
        start = time.perf_counter()
        with performance_monitor(stage_name,
                                 pixel_count=details.get('pixel_count', 0),
                                 cluster_count=details.get('cluster_count', 0)):
            yield details
        self.log_stage(stage_name, (time.perf_counter() - start) * 1000, **details)

    def log_stage(self, stage_name: str, duration_ms: float, **kwargs):
        """Log completion of an extraction stage."""
        self.stages[stage_name] = {'duration_ms': duration_ms, **kwargs}
        logger.debug(f"Extraction {self.extraction_id} - {stage_name} completed in {duration_ms:.1f}ms")

    def log_warning(self, message: str):
        """Log a warning for this extraction."""
        self.warnings.append(message)
        logger.warning(f"Color extraction warning: {message}")

    def _duration(self, stage_name: str) -> float:
        return self.stages.get(stage_name, {}).get('duration_ms', 0.0)

    def finish(self, cluster_count: int, fallback_used: bool = False) -> ExtractionMetrics:
        """Finish logging and return the run summary."""
        total_duration = (time.perf_counter() - self.start_time) * 1000

        metrics = ExtractionMetrics(
            extraction_id=self.extraction_id,
            total_duration_ms=total_duration,
            sampling_duration_ms=self._duration('sampling'),
            clustering_duration_ms=self._duration('clustering'),
            distinct_duration_ms=self._duration('distinctness'),
            positions_duration_ms=self._duration('positions'),
            image_size=self.image_size,
            sampled_pixel_count=self.stages.get('sampling', {}).get('pixel_count', 0),
            cluster_count=cluster_count,
            fallback_used=fallback_used,
            warnings=list(self.warnings)
        )

        logger.info(f"Extraction {self.extraction_id} completed in {total_duration:.1f}ms "
                    f"(colors: {cluster_count}, fallback: {fallback_used})")

        if metrics.warnings:
            logger.warning(f"Extraction completed with {len(metrics.warnings)} warnings")

        return metrics
