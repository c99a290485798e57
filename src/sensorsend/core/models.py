"""Shared dataclasses for sensor samples and network endpoints."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Sequence

DEFAULT_PORT = 1593


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_values(cls, values: Sequence[float]) -> Vector3:
        """Build from the first three components of ``values``."""
        if len(values) < 3:
            raise ValueError(f"expected 3 components, got {len(values)}")
        return cls(float(values[0]), float(values[1]), float(values[2]))


ZERO = Vector3()


@dataclass(frozen=True)
class SensorSample:
    """Most recent gravity and gyroscope vectors, fused into one record."""

    gravityX: float = 0.0
    gravityY: float = 0.0
    gravityZ: float = 0.0
    gyroX: float = 0.0
    gyroY: float = 0.0
    gyroZ: float = 0.0

    @classmethod
    def from_vectors(cls, gravity: Vector3, gyro: Vector3) -> SensorSample:
        return cls(gravity.x, gravity.y, gravity.z, gyro.x, gyro.y, gyro.z)

    @property
    def gravity(self) -> Vector3:
        return Vector3(self.gravityX, self.gravityY, self.gravityZ)

    @property
    def gyro(self) -> Vector3:
        return Vector3(self.gyroX, self.gyroY, self.gyroZ)

    def as_tuple(self) -> tuple[float, ...]:
        return astuple(self)


@dataclass(frozen=True)
class Endpoint:
    host: str
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
