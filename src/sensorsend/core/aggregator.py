"""Fuse gravity and gyroscope readings into one sample per raw event."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..sensors.channels import SensorChannel
from .models import ZERO, SensorSample, Vector3

logger = logging.getLogger(__name__)


class SampleAggregator:
    """
    Keep the last-known vector of each channel and emit a fused sample.

    A sample is produced for every recognized event, even before the other
    channel has reported; its fields read as zero until then. Events are
    expected from a single sensor callback context, so no locking is done.
    """

    def __init__(self) -> None:
        self._latest: Dict[SensorChannel, Vector3] = {channel: ZERO for channel in SensorChannel}

    def on_raw_event(self, channel: Any, values: Sequence[float]) -> Optional[SensorSample]:
        """Record ``values`` for ``channel`` and return the fused sample.

        Unrecognized channels and vectors with fewer than three components
        are ignored and yield ``None``.
        """
        resolved = SensorChannel.from_tag(channel)
        if resolved is None:
            logger.debug("Ignoring event from unknown sensor channel %r", channel)
            return None
        try:
            vector = Vector3.from_values(values)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed %s event %r (%s)", resolved.value, values, exc)
            return None

        self._latest[resolved] = vector
        return SensorSample.from_vectors(
            self._latest[SensorChannel.GRAVITY],
            self._latest[SensorChannel.GYROSCOPE],
        )

    def latest(self, channel: SensorChannel) -> Vector3:
        return self._latest[channel]

    def reset(self) -> None:
        """Forget both channels' vectors."""
        for channel in SensorChannel:
            self._latest[channel] = ZERO
