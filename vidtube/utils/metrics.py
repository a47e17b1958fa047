"""Prometheus metrics for observability."""

import time
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


def _label_key(names: tuple[str, ...], labels: dict[str, str]) -> tuple[str, ...]:
    return tuple(labels.get(name, "") for name in names)


def _render_labels(names: tuple[str, ...], values: tuple[str, ...]) -> str:
    return ",".join(f'{n}="{v}"' for n, v in zip(names, values))


@dataclass
class Counter:
    """Simple counter metric."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        """Increment the counter."""
        self._values[_label_key(self.labels, labels)] += amount

    def get(self, **labels: str) -> float:
        """Get counter value."""
        return self._values[_label_key(self.labels, labels)]


@dataclass
class Gauge:
    """Simple gauge metric."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        self._values[_label_key(self.labels, labels)] += amount

    def dec(self, amount: float = 1.0, **labels: str) -> None:
        self._values[_label_key(self.labels, labels)] -= amount

    def get(self, **labels: str) -> float:
        return self._values[_label_key(self.labels, labels)]


@dataclass
class Histogram:
    """Simple histogram metric with predefined buckets."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
    _counts: dict[tuple, dict[float, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    _sums: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))
    _totals: dict[tuple, int] = field(default_factory=lambda: defaultdict(int))

    def observe(self, value: float, **labels: str) -> None:
        """Observe a value."""
        key = _label_key(self.labels, labels)
        self._sums[key] += value
        self._totals[key] += 1
        for bucket in self.buckets:
            if value <= bucket:
                self._counts[key][bucket] += 1

    def count(self, **labels: str) -> int:
        return self._totals[_label_key(self.labels, labels)]


class MetricsRegistry:
    """Registry for all metrics."""

    def __init__(self):
        # HTTP metrics
        self.http_requests_total = Counter(
            name="http_requests_total",
            help="Total number of HTTP requests",
            labels=("method", "path", "status"),
        )
        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            help="HTTP request duration in seconds",
            labels=("method", "path"),
        )
        self.http_requests_in_progress = Gauge(
            name="http_requests_in_progress",
            help="Number of HTTP requests in progress",
            labels=("method",),
        )

        # View pipeline metrics
        self.view_pipeline_runs_total = Counter(
            name="view_pipeline_runs_total",
            help="Total number of view pipeline executions",
            labels=("view", "status"),
        )
        self.view_pipeline_duration_seconds = Histogram(
            name="view_pipeline_duration_seconds",
            help="View pipeline duration in seconds",
            labels=("view",),
        )

        # Engagement metrics
        self.engagement_toggles_total = Counter(
            name="engagement_toggles_total",
            help="Total number of like/subscription toggles",
            labels=("target", "active"),
        )
        self.view_count_failures_total = Counter(
            name="view_count_failures_total",
            help="Best-effort view count increments that failed",
        )

    @contextmanager
    def time_view(self, view: str) -> Iterator[None]:
        """Record run count and duration of one view pipeline execution."""
        start_time = time.monotonic()
        status = "ok"
        try:
            yield
        except Exception:
            status = "error"
            raise
        finally:
            self.view_pipeline_runs_total.inc(view=view, status=status)
            self.view_pipeline_duration_seconds.observe(time.monotonic() - start_time, view=view)

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus exposition format."""
        lines = []

        for metric in self.__dict__.values():
            if isinstance(metric, (Counter, Gauge)):
                kind = "counter" if isinstance(metric, Counter) else "gauge"
                lines.append(f"# HELP {metric.name} {metric.help}")
                lines.append(f"# TYPE {metric.name} {kind}")
                for label_values, value in metric._values.items():
                    if metric.labels:
                        labels_str = _render_labels(metric.labels, label_values)
                        lines.append(f"{metric.name}{{{labels_str}}} {value}")
                    else:
                        lines.append(f"{metric.name} {value}")

            elif isinstance(metric, Histogram):
                lines.append(f"# HELP {metric.name} {metric.help}")
                lines.append(f"# TYPE {metric.name} histogram")
                for label_values in metric._sums.keys():
                    if metric.labels:
                        base_labels = "{" + _render_labels(metric.labels, label_values) + ","
                    else:
                        base_labels = "{"

                    cumulative = 0
                    for bucket in metric.buckets:
                        cumulative += metric._counts[label_values].get(bucket, 0)
                        lines.append(f'{metric.name}_bucket{base_labels}le="{bucket}"}} {cumulative}')
                    total = metric._totals[label_values]
                    lines.append(f'{metric.name}_bucket{base_labels}le="+Inf"}} {total}')
                    plain = base_labels.rstrip(",") + "}" if base_labels != "{" else ""
                    lines.append(f"{metric.name}_sum{plain} {metric._sums[label_values]}")
                    lines.append(f"{metric.name}_count{plain} {total}")

        return "\n".join(lines)


# Global metrics registry
metrics = MetricsRegistry()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = self._normalize_path(request.url.path)

        metrics.http_requests_in_progress.inc(method=method)

        start_time = time.monotonic()
        try:
            response = await call_next(request)
            status = str(response.status_code)
        except Exception:
            status = "500"
            raise
        finally:
            duration = time.monotonic() - start_time
            metrics.http_requests_total.inc(method=method, path=path, status=status)
            metrics.http_request_duration_seconds.observe(duration, method=method, path=path)
            metrics.http_requests_in_progress.dec(method=method)

        return response

    def _normalize_path(self, path: str) -> str:
        """Normalize path for metric labels (replace IDs with placeholders)."""
        return "/".join(":id" if part.isdigit() else part for part in path.split("/"))
