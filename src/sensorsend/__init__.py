"""Stream phone-style motion sensor readings over UDP.

Raw gravity and gyroscope readings are fused into :class:`SensorSample`
records by :mod:`sensorsend.core.aggregator` and handed to the background
:mod:`sensorsend.core.dispatcher`, which fires one datagram per sample at
the endpoint held by a :class:`~sensorsend.core.session.ConnectionSession`.
"""

from .core import (
    BlankAddressError,
    ConnectionSession,
    Dispatcher,
    SampleAggregator,
    SensorSample,
    SensorStreamer,
    build_streamer,
)
from .sensors.channels import RawEvent, SensorChannel

__version__ = "0.3.0"

__all__ = [
    "BlankAddressError",
    "ConnectionSession",
    "Dispatcher",
    "RawEvent",
    "SampleAggregator",
    "SensorChannel",
    "SensorSample",
    "SensorStreamer",
    "build_streamer",
]
