"""
Core middleware.
"""

import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars

REQUEST_ID_HEADER = "X-Request-ID"


def _client_ip(request: HttpRequest) -> str:
    """First hop of X-Forwarded-For, else REMOTE_ADDR."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR") or "unknown"


class RequestContextMiddleware:
    """
    Binds request-scoped fields to the structlog context.

    Every log line emitted while handling the request carries the same
    trace_id, which is also echoed back in the X-Request-ID response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        clear_contextvars()
        bind_contextvars(
            request_id=request_id,
            **{
                "http.method": request.method,
                "http.path": request.path,
                "network.client.ip": _client_ip(request),
            },
        )
        try:
            response = self.get_response(request)
        finally:
            clear_contextvars()

        response[REQUEST_ID_HEADER] = request_id
        return response
