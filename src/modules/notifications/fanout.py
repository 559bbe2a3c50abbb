"""In-process notification fan-out.

``NotificationFanout`` keeps the set of connected listener channels and
pushes every broadcast event to each of them.  A channel is anything with a
``send(payload: str)`` method that raises when the listener can no longer
receive; ``QueueChannel`` is the implementation used by the SSE view.

Guarantees:
- Register, unregister and broadcast may run concurrently from any thread.
- Broadcasts are emitted one at a time, so every listener sees events in
  broadcast order.
- A channel whose ``send`` raises is dropped; ``broadcast`` itself never
  raises.
"""

from __future__ import annotations

import json
import queue
import threading
from typing import Any, Iterator, Protocol

import structlog
from django.core.serializers.json import DjangoJSONEncoder

logger = structlog.get_logger(__name__)

CONNECTED_EVENT = {"type": "connected", "message": "Connected to notifications"}


class ChannelClosed(Exception):
    """The listener behind a channel can no longer receive events."""


class Channel(Protocol):
    def send(self, payload: str) -> None: ...


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


class QueueChannel:
    """Bounded per-listener buffer drained by a streaming response.

    ``send`` never blocks the broadcaster: a full buffer means the consumer
    is too slow and the channel reports itself closed.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: queue.Queue[str] = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, payload: str) -> None:
        if self.closed:
            raise ChannelClosed("channel closed")
        try:
            self._queue.put_nowait(payload)
        except queue.Full as exc:
            self.close()
            raise ChannelClosed("channel buffer full") from exc

    def close(self) -> None:
        self._closed.set()

    def stream(self, keepalive: float) -> Iterator[str]:
        """Yield SSE frames until the channel is closed.

        Emits a ``: keepalive`` comment whenever nothing arrived within
        *keepalive* seconds; the write failing is how a dropped client is
        noticed.
        """
        while not self.closed:
            try:
                payload = self._queue.get(timeout=keepalive)
            except queue.Empty:
                yield ": keepalive\n\n"
                continue
            yield f"data: {payload}\n\n"


# ---------------------------------------------------------------------------
# Fanout
# ---------------------------------------------------------------------------


class NotificationFanout:
    """Thread-safe registry of listener channels."""

    def __init__(self) -> None:
        self._channels: set[Channel] = set()
        self._lock = threading.Lock()
        self._emit_lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def register(self, channel: Channel) -> bool:
        """Add *channel* and greet it; returns ``False`` if the greeting fails."""
        try:
            channel.send(self._encode(CONNECTED_EVENT))
        except Exception as exc:
            logger.warning("notification.register_failed", error=str(exc))
            return False

        with self._lock:
            self._channels.add(channel)
            count = len(self._channels)
        logger.info("notification.listener_registered", listeners=count)
        return True

    def unregister(self, channel: Channel) -> None:
        with self._lock:
            if channel not in self._channels:
                return
            self._channels.discard(channel)
            count = len(self._channels)
        logger.info("notification.listener_unregistered", listeners=count)

    def broadcast(self, event: dict[str, Any]) -> int:
        """Send *event* to every listener; returns the number of deliveries."""
        try:
            payload = self._encode(event)
        except (TypeError, ValueError) as exc:
            logger.error("notification.encode_failed", error=str(exc))
            return 0

        delivered = 0
        dead: list[Channel] = []
        with self._emit_lock:
            with self._lock:
                snapshot = list(self._channels)
            for channel in snapshot:
                try:
                    channel.send(payload)
                except Exception as exc:
                    logger.warning("notification.listener_dropped", error=str(exc))
                    dead.append(channel)
                else:
                    delivered += 1

        if dead:
            with self._lock:
                self._channels.difference_update(dead)

        logger.info(
            "notification.broadcast",
            event_type=event.get("type"),
            delivered=delivered,
            dropped=len(dead),
        )
        return delivered

    @staticmethod
    def _encode(event: dict[str, Any]) -> str:
        return json.dumps(event, cls=DjangoJSONEncoder)
