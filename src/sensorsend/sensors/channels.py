"""
Raw motion readings arrive tagged with the channel that produced them:

  - gravity   : float[3] gravity vector in m/s²
  - gyroscope : float[3] angular rate in rad/s

``parse_line()`` turns text records into :class:`RawEvent` objects. It
accepts JSON lines such as::

    {"channel": "gravity", "x": 0.1, "y": 0.2, "z": 9.8}
    {"channel": "gyro", "values": [0.01, 0.0, -0.02], "timestamp_ns": 1234}

and the short comma-separated form "channel,x,y,z".
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)

# Android Sensor.TYPE_* codes, as reported by the phone's sensor manager.
ANDROID_TYPE_GYROSCOPE = 4
ANDROID_TYPE_GRAVITY = 9


class SensorChannel(enum.Enum):
    GRAVITY = "gravity"
    GYROSCOPE = "gyroscope"

    @classmethod
    def from_tag(cls, tag: Any) -> Optional[SensorChannel]:
        """
        Resolve a channel tag, or return ``None`` for anything unrecognized.

        ``tag`` may be a :class:`SensorChannel`, a case-insensitive name
        (``"gyro"`` is accepted as shorthand) or an Android sensor type code.
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, bool):
            return None
        if isinstance(tag, int):
            return _ANDROID_TYPES.get(tag)
        if isinstance(tag, str):
            return _ALIASES.get(tag.strip().lower())
        return None


_ALIASES = {
    "gravity": SensorChannel.GRAVITY,
    "gyroscope": SensorChannel.GYROSCOPE,
    "gyro": SensorChannel.GYROSCOPE,
}

_ANDROID_TYPES = {
    ANDROID_TYPE_GRAVITY: SensorChannel.GRAVITY,
    ANDROID_TYPE_GYROSCOPE: SensorChannel.GYROSCOPE,
}


@dataclass
class RawEvent:
    channel: Any
    values: tuple[float, ...]
    timestamp_ns: Optional[int] = None


def _parse_json_line(text: str) -> RawEvent | None:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Bad JSON in sensor event stream: %r (%s)", text, exc)
        return None

    if not isinstance(obj, dict):
        logger.warning("Expected a JSON object for sensor event, got %r", obj)
        return None

    channel = obj.get("channel", obj.get("sensor"))
    if channel is None:
        logger.warning("Missing field %s in sensor event: %r", "channel", obj)
        return None

    try:
        if "values" in obj:
            values = tuple(float(v) for v in obj["values"])
        else:
            values = (float(obj["x"]), float(obj["y"]), float(obj["z"]))
    except KeyError as exc:
        logger.warning("Missing axis %s in sensor event: %r", exc, obj)
        return None
    except (TypeError, ValueError) as exc:
        logger.warning("Bad axis value in sensor event %r (%s)", obj, exc)
        return None

    timestamp_ns = obj.get("timestamp_ns")
    if timestamp_ns is not None:
        try:
            timestamp_ns = int(timestamp_ns)
        except (TypeError, ValueError):
            timestamp_ns = None

    return RawEvent(channel=channel, values=values, timestamp_ns=timestamp_ns)


def _parse_csv_line(text: str) -> RawEvent | None:
    parts: Sequence[str] = [part.strip() for part in text.split(",")]
    if len(parts) < 4:
        logger.warning(
            "Expected channel plus 3 comma-separated values, got %d fields: %r",
            len(parts),
            text,
        )
        return None
    channel: Any = parts[0]
    if channel.isdigit():
        channel = int(channel)
    try:
        values = tuple(float(p) for p in parts[1:4])
    except ValueError as exc:
        logger.warning("Bad CSV field in sensor event %r (%s)", text, exc)
        return None
    return RawEvent(channel=channel, values=values)


def parse_line(line: str) -> RawEvent | None:
    """
    Parse a single text line into a :class:`RawEvent`.

    Invalid lines return ``None`` so callers can skip them without raising.
    The channel tag is passed through as-is; resolving it is left to the
    aggregator, which ignores channels it does not know.
    """
    text = line.strip()
    if not text:
        return None
    if text[0] == "{":
        return _parse_json_line(text)
    return _parse_csv_line(text)


__all__ = [
    "ANDROID_TYPE_GRAVITY",
    "ANDROID_TYPE_GYROSCOPE",
    "RawEvent",
    "SensorChannel",
    "parse_line",
]
