from .logging import configure_logging, get_logger
from .metrics import InMemoryMetrics, MetricPoint, MetricsSink, Timer

__all__ = [
    "configure_logging",
    "get_logger",
    "InMemoryMetrics",
    "MetricPoint",
    "MetricsSink",
    "Timer",
]
