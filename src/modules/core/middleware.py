import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

MAX_REQUEST_ID_LENGTH = 128

logger = structlog.get_logger()


def _request_id(request: HttpRequest) -> str:
    incoming = request.META.get("HTTP_X_REQUEST_ID", "").strip()
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
        return incoming
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Binds a correlation ID, method and path to every log line of a request.

    The ID comes from the ``X-Request-ID`` header (over-long values are
    replaced) or is a fresh UUID4, and is echoed back in the response.
    Streaming responses such as the notification stream are logged when they
    open, since they only finish when the client goes away.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _request_id(request)
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        logger.info("request_started")
        response = self.get_response(request)
        logger.info(
            "stream_opened" if response.streaming else "request_finished",
            status_code=response.status_code,
        )

        response["X-Request-ID"] = cid
        return response
