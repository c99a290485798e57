from __future__ import annotations

import math

import numpy as np
import pytest

from sensorsend.core.codec import (
    FIELD_NAMES,
    SampleDecodeError,
    decode_sample,
    encode_sample,
    format_sample,
)
from sensorsend.core.models import SensorSample


def test_format_keeps_field_order_and_names() -> None:
    sample = SensorSample(0.1, 0.2, 9.8, 0.0, 0.0, 0.0)

    assert format_sample(sample) == (
        "SensorData(gravityX=0.1, gravityY=0.2, gravityZ=9.8, "
        "gyroX=0.0, gyroY=0.0, gyroZ=0.0)"
    )
    assert FIELD_NAMES == ("gravityX", "gravityY", "gravityZ", "gyroX", "gyroY", "gyroZ")


def test_encode_then_decode_recovers_values() -> None:
    sample = SensorSample(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)

    decoded = decode_sample(encode_sample(sample))

    assert decoded.as_tuple() == pytest.approx((1.0, 2.0, 3.0, 4.0, 5.0, 6.0))


def test_decode_accepts_jvm_float_text() -> None:
    payload = (
        "SensorData(gravityX=1.0E-5, gravityY=-0.0, gravityZ=9.80665, "
        "gyroX=NaN, gyroY=Infinity, gyroZ=-Infinity)"
    )

    sample = decode_sample(payload)

    assert sample.gravityX == pytest.approx(1e-5)
    assert sample.gravityZ == pytest.approx(9.80665)
    assert math.isnan(sample.gyroX)
    assert sample.gyroY == math.inf
    assert sample.gyroZ == -math.inf


@pytest.mark.parametrize(
    "payload",
    [
        b"GravityData(x=1.0, y=2.0, z=3.0)",
        b"SensorData(gravityX=1.0, gravityY=2.0, gravityZ=3.0, gyroX=4.0, gyroY=5.0)",
        b"SensorData(gravityX=1.0, gravityY=2.0, gravityZ=oops, gyroX=4.0, gyroY=5.0, gyroZ=6.0)",
        b"SensorData(gravityX=1.0, gravityY=2.0, gravityZ=3.0, gyroX=4.0, gyroY=5.0, gyroZ=6.0, extra=1)",
        b"SensorData(gravityX=1.0, gravityY=2.0, gravityZ=3.0, gyroX=4.0, gyroY=5.0, gyroZ=6.0, gyroZ=7.0)",
        b"\xff\xfe",
        b"",
    ],
)
def test_decode_rejects_malformed_payloads(payload: bytes) -> None:
    with pytest.raises(SampleDecodeError):
        decode_sample(payload)


def test_decode_error_is_a_value_error() -> None:
    assert issubclass(SampleDecodeError, ValueError)


def test_numpy_and_int_fields_encode_as_plain_floats() -> None:
    sample = SensorSample(np.float64(0.1), np.float32(0.5), 9, 0, np.float64(-2.25), 1)

    text = format_sample(sample)

    assert text == (
        "SensorData(gravityX=0.1, gravityY=0.5, gravityZ=9.0, "
        "gyroX=0.0, gyroY=-2.25, gyroZ=1.0)"
    )
    assert decode_sample(encode_sample(sample)).as_tuple() == (0.1, 0.5, 9.0, 0.0, -2.25, 1.0)


def test_decode_rejects_repeated_field() -> None:
    payload = (
        "SensorData(gravityX=1.0, gravityY=2.0, gravityZ=3.0, "
        "gyroX=4.0, gyroY=5.0, gyroZ=6.0, gyroZ=7.0)"
    )

    with pytest.raises(SampleDecodeError, match="duplicate field 'gyroZ'"):
        decode_sample(payload)
