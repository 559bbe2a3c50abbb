"""Server-Sent Events endpoint for live order notifications."""

from __future__ import annotations

from typing import Iterator

import structlog
from django.apps import apps
from django.conf import settings
from django.http import HttpRequest, StreamingHttpResponse
from django.views.decorators.http import require_GET

from modules.notifications.fanout import NotificationFanout, QueueChannel

logger = structlog.get_logger(__name__)


def get_fanout() -> NotificationFanout:
    return apps.get_app_config("notifications").fanout


def _event_stream(fanout: NotificationFanout, channel: QueueChannel) -> Iterator[str]:
    if not fanout.register(channel):
        return
    try:
        yield from channel.stream(settings.NOTIFICATIONS_KEEPALIVE_SECONDS)
    finally:
        channel.close()
        fanout.unregister(channel)
        logger.info("notification.stream_closed")


@require_GET
def notification_stream(request: HttpRequest) -> StreamingHttpResponse:
    """GET /api/v1/notifications/

    Opens a text/event-stream; the first frame is the ``connected`` greeting
    and every later frame is an order notification or a keepalive comment.
    """
    channel = QueueChannel(maxsize=settings.NOTIFICATIONS_CHANNEL_BUFFER)
    logger.info("notification.stream_opened")

    response = StreamingHttpResponse(
        _event_stream(get_fanout(), channel),
        content_type="text/event-stream",
    )
    response["Cache-Control"] = "no-cache"
    response["X-Accel-Buffering"] = "no"
    return response
