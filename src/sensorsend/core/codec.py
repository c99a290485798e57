"""
Wire format for one sample: a single human-readable record, e.g.::

    SensorData(gravityX=0.1, gravityY=0.2, gravityZ=9.8, gyroX=0.0, gyroY=0.0, gyroZ=0.0)

Field order and names are fixed so existing receivers keep parsing it.
The decoder also accepts JVM float text (``1.0E-5``, ``NaN``, ``Infinity``).
"""

from __future__ import annotations

import re
from dataclasses import fields

from .models import SensorSample

RECORD_NAME = "SensorData"
FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(SensorSample))

_RECORD_RE = re.compile(r"^\s*SensorData\((?P<body>.*)\)\s*$", re.DOTALL)


class SampleDecodeError(ValueError):
    """Raised when a payload is not a well-formed SensorData record."""


def format_sample(sample: SensorSample) -> str:
    body = ", ".join(f"{name}={float(getattr(sample, name))!r}" for name in FIELD_NAMES)
    return f"{RECORD_NAME}({body})"


def encode_sample(sample: SensorSample) -> bytes:
    """Encode ``sample`` as the UTF-8 datagram payload."""
    return format_sample(sample).encode("utf-8")


def decode_sample(payload: bytes | str) -> SensorSample:
    """Parse a payload produced by :func:`encode_sample` (or the phone app)."""
    if isinstance(payload, (bytes, bytearray)):
        try:
            text = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SampleDecodeError(f"payload is not UTF-8 text: {exc}") from exc
    else:
        text = payload

    match = _RECORD_RE.match(text)
    if match is None:
        raise SampleDecodeError(f"not a {RECORD_NAME} record: {text[:80]!r}")

    values: dict[str, float] = {}
    for item in match.group("body").split(","):
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or name not in FIELD_NAMES:
            raise SampleDecodeError(f"unexpected field {item.strip()!r}")
        if name in values:
            raise SampleDecodeError(f"duplicate field {name!r}")
        try:
            values[name] = float(raw.strip())
        except ValueError as exc:
            raise SampleDecodeError(f"bad value for {name}: {raw.strip()!r}") from exc

    missing = [name for name in FIELD_NAMES if name not in values]
    if missing:
        raise SampleDecodeError(f"missing fields: {', '.join(missing)}")
    return SensorSample(**values)


__all__ = [
    "FIELD_NAMES",
    "SampleDecodeError",
    "decode_sample",
    "encode_sample",
    "format_sample",
]
