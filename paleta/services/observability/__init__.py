"""
Observability module for the Paleta color pipeline.

Provides performance monitoring, per-extraction stage logging and in-process
metrics aggregation.
"""

from .metrics import (
    PerformanceMetrics,
    ExtractionMetrics,
    MetricsCollector,
    ExtractionLogger,
    get_metrics_collector,
    reset_metrics,
    performance_monitor,
    performance_tracked,
)

__all__ = [
    'PerformanceMetrics',
    'ExtractionMetrics',
    'MetricsCollector',
    'ExtractionLogger',
    'get_metrics_collector',
    'reset_metrics',
    'performance_monitor',
    'performance_tracked',
]
