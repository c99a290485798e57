"""Synthetic gravity/gyroscope readings for running without a device."""

from __future__ import annotations

import itertools
import logging
import math
import time
from typing import Callable, Iterator, Optional

from .channels import RawEvent, SensorChannel

logger = logging.getLogger(__name__)

STANDARD_GRAVITY = 9.80665


def synthetic_events(
    rate_hz: float = 50.0,
    duration_s: Optional[float] = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[RawEvent]:
    """
    Yield alternating gravity and gyroscope events at ``rate_hz`` per channel.

    The gravity vector slowly tilts around the X axis while the gyroscope
    reports the matching angular rate, so a receiver sees a plausible,
    smoothly varying stream. ``duration_s=None`` runs until the consumer
    stops iterating.
    """
    rate = max(0.1, float(rate_hz))
    period = 1.0 / rate
    total_ticks = None if duration_s is None else max(0, int(round(float(duration_s) * rate)))
    tilt_rate = 0.5  # rad/s

    logger.info("Synthetic sensor source at %.1f Hz per channel", rate)
    ticks = itertools.count() if total_ticks is None else range(total_ticks)
    for tick in ticks:
        t_s = tick * period
        timestamp_ns = int(t_s * 1e9)
        angle = 0.3 * math.sin(tilt_rate * t_s)
        yield RawEvent(
            channel=SensorChannel.GRAVITY,
            values=(
                0.0,
                STANDARD_GRAVITY * math.sin(angle),
                STANDARD_GRAVITY * math.cos(angle),
            ),
            timestamp_ns=timestamp_ns,
        )
        yield RawEvent(
            channel=SensorChannel.GYROSCOPE,
            values=(0.3 * tilt_rate * math.cos(tilt_rate * t_s), 0.0, 0.0),
            timestamp_ns=timestamp_ns,
        )
        sleep(period)
