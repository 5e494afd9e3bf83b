"""Metrics helpers that log every sample and can export to Prometheus."""

from __future__ import annotations

import logging
import re
import time
from contextlib import contextmanager
from typing import Any, Iterator

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

_PROM_NAME_RE = re.compile(r"[^a-zA-Z0-9_]")


class MetricsRecorder:
    """Record counters and timings for catalog and scanning operations."""

    def __init__(
        self,
        *,
        enabled: bool = True,
        namespace: str = "docviewer",
        logger: logging.Logger | None = None,
        prometheus_enabled: bool = False,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._enabled = enabled
        self._namespace = namespace.strip() or "docviewer"
        self._logger = logger or logging.getLogger("docviewer.metrics")
        self._registry = registry if registry is not None else (CollectorRegistry() if prometheus_enabled else None)
        self._counters: dict[tuple[str, tuple[str, ...]], Counter] = {}
        self._histograms: dict[tuple[str, tuple[str, ...]], Histogram] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def prometheus_enabled(self) -> bool:
        return self._registry is not None

    @property
    def prometheus_content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def render_prometheus(self) -> bytes:
        if self._registry is None:
            raise RuntimeError("Prometheus export is disabled")
        return generate_latest(self._registry)

    def increment(self, metric: str, *, value: int = 1, **tags: Any) -> None:
        if not self._enabled:
            return
        clean_tags = _clean(tags)
        self._log(metric, {"value": int(value)}, clean_tags)
        if self._registry is not None:
            counter = self._counter(metric, tuple(sorted(clean_tags)))
            _labelled(counter, clean_tags).inc(max(int(value), 0))

    def record_timing(self, metric: str, duration_seconds: float, **tags: Any) -> None:
        if not self._enabled:
            return
        clean_tags = _clean(tags)
        duration = max(duration_seconds, 0.0)
        self._log(metric, {"duration_ms": round(duration * 1000.0, 4)}, clean_tags)
        if self._registry is not None:
            histogram = self._histogram(metric, tuple(sorted(clean_tags)))
            _labelled(histogram, clean_tags).observe(duration)

    @contextmanager
    def track_timing(self, metric: str, **tags: Any) -> Iterator[None]:
        """Time the wrapped block and record it under *metric*."""

        start = time.perf_counter()
        try:
            yield
        finally:
            self.record_timing(metric, time.perf_counter() - start, **tags)

    def _log(self, metric: str, fields: dict[str, Any], tags: dict[str, Any]) -> None:
        segments = [f"{key}={_stringify(value)}" for key, value in sorted(fields.items())]
        segments.extend(f"{key}={_stringify(value)}" for key, value in sorted(tags.items()))
        message = f"{self._namespace}.{metric}"
        if segments:
            message = f"{message} {' '.join(segments)}"
        self._logger.info(message)

    def _counter(self, metric: str, label_keys: tuple[str, ...]) -> Counter:
        key = (metric, label_keys)
        if key not in self._counters:
            self._counters[key] = Counter(
                self._metric_name(metric),
                f"{metric} counter",
                labelnames=[_label(name) for name in label_keys],
                registry=self._registry,
            )
        return self._counters[key]

    def _histogram(self, metric: str, label_keys: tuple[str, ...]) -> Histogram:
        key = (metric, label_keys)
        if key not in self._histograms:
            self._histograms[key] = Histogram(
                self._metric_name(metric) + "_seconds",
                f"{metric} duration",
                labelnames=[_label(name) for name in label_keys],
                registry=self._registry,
            )
        return self._histograms[key]

    def _metric_name(self, metric: str) -> str:
        return f"{_PROM_NAME_RE.sub('_', self._namespace)}_{_PROM_NAME_RE.sub('_', metric)}".strip("_")


def _clean(tags: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in tags.items() if value is not None}


def _label(name: str) -> str:
    return _PROM_NAME_RE.sub("_", name) or "label"


def _labelled(metric: Counter | Histogram, tags: dict[str, Any]):
    if not tags:
        return metric
    return metric.labels(**{_label(key): _stringify(value) for key, value in tags.items()})


def _stringify(value: Any) -> str:
    if isinstance(value, float):
        return f"{int(value)}" if value.is_integer() else f"{value:.4f}"
    return str(value)


__all__ = ["MetricsRecorder"]
