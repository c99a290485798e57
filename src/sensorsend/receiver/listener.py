"""
UDP listener that decodes incoming SensorData datagrams.

This is the receiving end of the stream, used to check what a phone or
``sensorsend stream`` is sending. Decoded samples land in a bounded,
thread-safe :class:`ReceivedSamples` store and are optionally forwarded to
a callback.
"""

from __future__ import annotations

import logging
import socket
import threading
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

import numpy as np

from ..core.codec import FIELD_NAMES, SampleDecodeError, decode_sample
from ..core.models import DEFAULT_PORT, SensorSample

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5000
MAX_DATAGRAM_SIZE = 65535


class ReceivedSamples:
    """Bounded store of the most recent decoded samples.

    The listener thread appends while other threads take snapshots.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._items: Deque[SensorSample] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._total = 0

    def append(self, sample: SensorSample) -> None:
        with self._lock:
            self._items.append(sample)
            self._total += 1

    def snapshot(self) -> List[SensorSample]:
        with self._lock:
            return list(self._items)

    def latest(self) -> Optional[SensorSample]:
        with self._lock:
            return self._items[-1] if self._items else None

    @property
    def total(self) -> int:
        """Samples received since creation, including ones already evicted."""
        with self._lock:
            return self._total

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def to_array(self) -> np.ndarray:
        """Return an ``(N, 6)`` array with columns in wire field order."""
        samples = self.snapshot()
        if not samples:
            return np.empty((0, len(FIELD_NAMES)), dtype=np.float64)
        return np.asarray([s.as_tuple() for s in samples], dtype=np.float64)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class DatagramListener:
    """Bind a UDP port and decode datagrams on a background thread."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = DEFAULT_PORT,
        *,
        callback: Optional[Callable[[SensorSample, Tuple[str, int]], None]] = None,
        capacity: int = DEFAULT_CAPACITY,
        poll_interval: float = 0.2,
    ) -> None:
        self.host = host
        self.port = int(port)
        self.callback = callback
        self.samples = ReceivedSamples(capacity)
        self.rejected = 0
        self._poll_interval = poll_interval
        self._socket: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def bound_port(self) -> Optional[int]:
        """Actual port once started (useful when ``port=0`` was requested)."""
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            sock.settimeout(self._poll_interval)
        except OSError:
            sock.close()
            raise
        self._socket = sock
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._receive_loop,
            name="SensorSendListener",
            daemon=True,
        )
        self._thread.start()
        logger.info("Listening for sensor data on UDP %s:%d", self.host, self.bound_port)

    def stop(self, *, join: bool = True, timeout: Optional[float] = 2.0) -> None:
        self._stop_event.set()
        if join and self._thread is not None:
            self._thread.join(timeout)
        self._thread = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _receive_loop(self) -> None:
        sock = self._socket
        if sock is None:
            return
        while not self._stop_event.is_set():
            try:
                data, addr = sock.recvfrom(MAX_DATAGRAM_SIZE)
            except socket.timeout:
                continue
            except OSError as exc:
                if not self._stop_event.is_set():
                    logger.error("Listener socket error: %s", exc)
                break
            self._handle_datagram(data, addr)

    def _handle_datagram(self, data: bytes, addr: Tuple[str, int]) -> None:
        try:
            sample = decode_sample(data)
        except SampleDecodeError as exc:
            self.rejected += 1
            logger.warning("Dropping datagram from %s:%d: %s", addr[0], addr[1], exc)
            return

        self.samples.append(sample)
        if self.callback is not None:
            try:
                self.callback(sample, addr)
            except Exception:
                logger.exception("Error in listener callback for sample %r", sample)

    def __enter__(self) -> DatagramListener:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
