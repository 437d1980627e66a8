"""Prometheus metrics."""
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

# HTTP (server)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

# Sync (client)
sync_runs_total = Counter(
    "sync_runs_total",
    "Reconcile runs by outcome",
    ["outcome"],
)

sync_remote_calls_total = Counter(
    "sync_remote_calls_total",
    "Remote calls issued by the reconciler",
    ["operation"],
)

sync_failures_total = Counter(
    "sync_failures_total",
    "Reconcile runs aborted, by phase",
    ["phase"],
)

sync_changes_total = Counter(
    "sync_changes_total",
    "Changes applied by reconcile runs",
)


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def setup_metrics(app: FastAPI) -> None:
    """Setup request instrumentation and the Prometheus metrics endpoint."""

    @app.middleware("http")
    async def record_request(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        endpoint = _route_template(request)
        http_requests_total.labels(request.method, endpoint, str(response.status_code)).inc()
        http_request_duration_seconds.labels(request.method, endpoint).observe(time.perf_counter() - started)
        return response

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
