"""Shared fixtures for the sensorsend tests."""

from __future__ import annotations

import threading
import time
from typing import Callable

import pytest

from sensorsend.receiver import DatagramListener


class RecordingSocket:
    """Stand-in for a UDP socket that records every ``sendto`` call."""

    def __init__(self) -> None:
        self.sent: list[tuple[bytes, tuple[str, int]]] = []
        self.closed = False
        self._lock = threading.Lock()

    def sendto(self, payload: bytes, address: tuple[str, int]) -> int:
        with self._lock:
            self.sent.append((payload, address))
        return len(payload)

    def close(self) -> None:
        self.closed = True


class SocketFactory:
    def __init__(self) -> None:
        self.created: list[RecordingSocket] = []

    def __call__(self) -> RecordingSocket:
        sock = RecordingSocket()
        self.created.append(sock)
        return sock

    @property
    def sent(self) -> list[tuple[bytes, tuple[str, int]]]:
        return [item for sock in self.created for item in sock.sent]


@pytest.fixture
def socket_factory() -> SocketFactory:
    return SocketFactory()


@pytest.fixture
def identity_resolver() -> Callable[[str], str]:
    return lambda host: host


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        deadline = time.time() + timeout
        while time.time() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait


@pytest.fixture
def listener():
    """UDP listener on an ephemeral loopback port."""
    handle = DatagramListener("127.0.0.1", 0, poll_interval=0.05)
    handle.start()
    yield handle
    handle.stop()
