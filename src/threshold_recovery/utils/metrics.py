"""In-memory counters and timers for search instrumentation."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List, Protocol, Tuple


Labels = Tuple[Tuple[str, str], ...]


@dataclass
class MetricPoint:
    """Represents a single metric sample."""

    value: float
    labels: Labels


class MetricsSink(Protocol):
    def emit_counter(self, name: str, value: float = 1.0, **labels: str) -> None: ...

    def emit_timer(self, name: str, value: float, **labels: str) -> None: ...


class InMemoryMetrics:
    """In-memory sink for counters and timers."""

    def __init__(self) -> None:
        self.counters: Dict[str, List[MetricPoint]] = {}
        self.timers: Dict[str, List[MetricPoint]] = {}

    def _emit(self, store: Dict[str, List[MetricPoint]], name: str, value: float, labels: Labels) -> None:
        store.setdefault(name, []).append(MetricPoint(value=value, labels=labels))

    def emit_counter(self, name: str, value: float = 1.0, **labels: str) -> None:
        self._emit(self.counters, name, value, tuple(labels.items()))

    def emit_timer(self, name: str, value: float, **labels: str) -> None:
        self._emit(self.timers, name, value, tuple(labels.items()))

    def total(self, name: str) -> float:
        return sum(point.value for point in self.counters.get(name, []))

    def snapshot(self) -> Dict[str, Dict[str, List[MetricPoint]]]:
        return {
            "counters": {k: list(v) for k, v in self.counters.items()},
            "timers": {k: list(v) for k, v in self.timers.items()},
        }


class Timer:
    """Context manager that records elapsed time to a metrics sink."""

    def __init__(self, sink: MetricsSink, name: str, **labels: str) -> None:
        self.sink = sink
        self.name = name
        self.labels = labels
        self._start: float | None = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        if self._start is None:
            return
        elapsed = time.monotonic() - self._start
        self.sink.emit_timer(self.name, elapsed, **self.labels)
