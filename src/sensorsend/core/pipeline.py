"""Wire the aggregator, session and dispatcher into one streamer."""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..config import SensorSendConfig
from ..sensors.channels import RawEvent
from ..tools.debug import debug_enabled
from .aggregator import SampleAggregator
from .dispatcher import Dispatcher, Resolver
from .models import Endpoint, SensorSample
from .session import ConnectionSession, SocketFactory

logger = logging.getLogger(__name__)

DEBUG_LOG_INTERVAL_S = 5.0


@dataclass
class SensorStreamer:
    """Turn raw sensor events into datagrams without blocking the caller."""

    aggregator: SampleAggregator
    dispatcher: Dispatcher

    @property
    def session(self) -> ConnectionSession:
        return self.dispatcher.session

    def connect(self, address: str) -> Endpoint:
        return self.session.connect(address)

    def disconnect(self) -> None:
        self.session.disconnect()

    def on_raw_event(self, channel: Any, values: Sequence[float]) -> Optional[SensorSample]:
        """Aggregate one raw reading and hand the sample to the dispatcher."""
        sample = self.aggregator.on_raw_event(channel, values)
        if sample is not None:
            self.dispatcher.send(sample)
        return sample

    def feed(self, events: Iterable[RawEvent]) -> int:
        """
        Push every event from ``events`` through :meth:`on_raw_event`.

        Returns the number of samples produced. ``None`` entries (unparseable
        lines) are skipped.
        """
        produced = 0
        debug_on = debug_enabled()
        debug_start = time.perf_counter()
        debug_last_log = debug_start
        debug_window = 0

        for event in events:
            if event is None:
                continue
            if self.on_raw_event(event.channel, event.values) is not None:
                produced += 1
                debug_window += 1

            if debug_on:
                now = time.perf_counter()
                if now - debug_last_log >= DEBUG_LOG_INTERVAL_S:
                    elapsed_total = max(1e-9, now - debug_start)
                    elapsed_window = max(1e-9, now - debug_last_log)
                    logger.info(
                        "samples=%d avg≈%.1f Hz recent≈%.1f Hz stats=%s",
                        produced,
                        produced / elapsed_total,
                        debug_window / elapsed_window,
                        self.dispatcher.stats.snapshot(),
                    )
                    debug_last_log = now
                    debug_window = 0
        return produced

    def close(self, wait: bool = True) -> None:
        """Stop the dispatcher, then release the session's socket."""
        self.dispatcher.close(wait=wait)
        self.session.close()


def build_streamer(
    cfg: SensorSendConfig,
    *,
    socket_factory: Optional[SocketFactory] = None,
    resolver: Optional[Resolver] = None,
) -> SensorStreamer:
    """
    Build a :class:`SensorStreamer` from configuration.

    When ``cfg.autoconnect`` is set the session is connected to ``cfg.host``
    straight away.
    """
    normalized = cfg.sanitized()
    session = ConnectionSession(port=normalized.port, socket_factory=socket_factory)
    dispatcher = Dispatcher(
        session,
        max_workers=normalized.max_workers,
        max_pending=normalized.max_pending,
        resolver=resolver or socket.gethostbyname,
    )
    streamer = SensorStreamer(aggregator=SampleAggregator(), dispatcher=dispatcher)
    if normalized.autoconnect:
        streamer.connect(normalized.host)
    return streamer


__all__ = ["SensorStreamer", "build_streamer"]
