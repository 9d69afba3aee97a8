from __future__ import annotations

"""Prometheus counters for HTTP traffic and chat routing outcomes."""

import time

from fastapi import Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.responses import Response

from sme_assistant.app.settings import settings

HTTP_REQUESTS = Counter(
    "sme_http_requests_total",
    "HTTP requests by method, route template and status code",
    ["method", "path", "status"],
)
HTTP_DURATION = Histogram(
    "sme_http_request_duration_seconds",
    "Time spent serving HTTP requests",
    ["method", "path"],
)
CHAT_RESPONSES = Counter(
    "sme_chat_responses_total",
    "Chat responses by provider and outcome",
    ["provider", "outcome"],
)

UNMATCHED_ROUTE = "unmatched"


def record_chat_response(provider: str, outcome: str) -> None:
    if settings.metrics_enabled:
        CHAT_RESPONSES.labels(provider, outcome).inc()


def route_label(request: Request) -> str:
    """Route template such as /api/docs/{doc_id:path}, never the raw URL."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def _observe(request: Request, status: int, elapsed: float) -> None:
    label = route_label(request)
    HTTP_REQUESTS.labels(request.method, label, str(status)).inc()
    HTTP_DURATION.labels(request.method, label).observe(elapsed)


async def metrics_middleware(request: Request, call_next):
    if not settings.metrics_enabled or request.url.path == "/metrics":
        return await call_next(request)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        _observe(request, 500, time.perf_counter() - started)
        raise
    _observe(request, response.status_code, time.perf_counter() - started)
    return response


def metrics_response() -> Response:
    body = generate_latest() if settings.metrics_enabled else b""
    status = 200 if settings.metrics_enabled else 404
    return Response(body, status_code=status, media_type=CONTENT_TYPE_LATEST)
