"""Core streaming pipeline: aggregation, connection state and dispatch.

Raw readings flow through :class:`SampleAggregator` into fused
:class:`SensorSample` records, which :class:`Dispatcher` sends on a worker
pool to the endpoint held by a :class:`ConnectionSession`.
:func:`build_streamer` wires all of it from a :class:`SensorSendConfig`.
"""

from .aggregator import SampleAggregator
from .codec import SampleDecodeError, decode_sample, encode_sample, format_sample
from .dispatcher import DispatchStats, Dispatcher
from .models import DEFAULT_PORT, Endpoint, SensorSample, Vector3
from .pipeline import SensorStreamer, build_streamer
from .session import BlankAddressError, ConnectionSession

__all__ = [
    "DEFAULT_PORT",
    "BlankAddressError",
    "ConnectionSession",
    "DispatchStats",
    "Dispatcher",
    "Endpoint",
    "SampleAggregator",
    "SampleDecodeError",
    "SensorSample",
    "SensorStreamer",
    "Vector3",
    "build_streamer",
    "decode_sample",
    "encode_sample",
    "format_sample",
]
