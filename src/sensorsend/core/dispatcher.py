"""Fire-and-forget delivery of sensor samples as UDP datagrams."""

from __future__ import annotations

import logging
import socket
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .codec import encode_sample
from .models import Endpoint, SensorSample
from .session import ConnectionSession

logger = logging.getLogger(__name__)

Resolver = Callable[[str], str]
Encoder = Callable[[SensorSample], bytes]


@dataclass
class DispatchStats:
    """Diagnostic counters; never consulted for connection state."""

    submitted: int = 0
    sent: int = 0
    failed: int = 0
    dropped: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def increment(self, name: str) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + 1)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {
                "submitted": self.submitted,
                "sent": self.sent,
                "failed": self.failed,
                "dropped": self.dropped,
            }


class Dispatcher:
    """
    Hand samples to a worker pool that encodes, resolves and sends them.

    :meth:`send` never blocks on the network: it checks the session's
    connected flag, snapshots the endpoint and submits the work. At most
    ``max_pending`` sends are queued or in flight; extra samples are shed
    and counted as dropped. Resolution and socket errors are logged in the
    worker and go no further.
    """

    def __init__(
        self,
        session: ConnectionSession,
        *,
        max_workers: int = 2,
        max_pending: int = 256,
        resolver: Resolver = socket.gethostbyname,
        encoder: Encoder = encode_sample,
    ) -> None:
        self._session = session
        self._resolver = resolver
        self._encoder = encoder
        self._max_pending = max(1, int(max_pending))
        self._slots = threading.BoundedSemaphore(self._max_pending)
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="SensorSendDispatch",
        )
        self.stats = DispatchStats()

    @property
    def session(self) -> ConnectionSession:
        return self._session

    def send(self, sample: SensorSample) -> Optional[Future]:
        """
        Queue ``sample`` for delivery to the session's current endpoint.

        Returns the background future, or ``None`` when the session is
        disconnected or the pending limit was hit.
        """
        endpoint = self._session.endpoint
        if endpoint is None:
            return None

        if not self._slots.acquire(blocking=False):
            self.stats.increment("dropped")
            logger.warning("Send backlog full (%d pending), dropping sample", self._max_pending)
            return None

        try:
            future = self._executor.submit(self._deliver, sample, endpoint)
        except RuntimeError:
            self._slots.release()
            logger.debug("Dispatcher closed, ignoring sample")
            return None

        self.stats.increment("submitted")
        future.add_done_callback(self._release_slot)
        return future

    def _release_slot(self, _future: Future) -> None:
        self._slots.release()

    def _deliver(self, sample: SensorSample, endpoint: Endpoint) -> bool:
        try:
            payload = self._encoder(sample)
            address = self._resolver(endpoint.host)
            self._session.send_datagram(payload, (address, endpoint.port))
        except (OSError, UnicodeError) as exc:
            self.stats.increment("failed")
            logger.error("Error sending sensor data to %s: %s", endpoint, exc)
            return False
        except Exception:
            self.stats.increment("failed")
            logger.exception("Unexpected error sending sensor data to %s", endpoint)
            return False

        self.stats.increment("sent")
        logger.debug("Sent: %s", sample)
        return True

    def close(self, wait: bool = True) -> None:
        """Stop accepting samples; with ``wait`` let queued sends finish."""
        self._executor.shutdown(wait=wait)
