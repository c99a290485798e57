from __future__ import annotations

import socket

import numpy as np
import pytest

from sensorsend.core.codec import encode_sample
from sensorsend.core.models import SensorSample
from sensorsend.receiver import DatagramListener, ReceivedSamples
from sensorsend.receiver import listener as listener_module


def _send(port: int, payload: bytes) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.sendto(payload, ("127.0.0.1", port))


def test_listener_decodes_and_skips_garbage(listener, wait_for) -> None:
    port = listener.bound_port
    _send(port, b"hello")
    _send(port, encode_sample(SensorSample(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)))

    assert wait_for(lambda: listener.samples.total == 1 and listener.rejected == 1)
    assert listener.samples.latest() == SensorSample(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)


def test_listener_accepts_phone_payload(listener, wait_for) -> None:
    payload = b"SensorData(gravityX=0.0, gravityY=9.81, gravityZ=0.0, gyroX=1.0E-4, gyroY=0.0, gyroZ=0.0)"
    _send(listener.bound_port, payload)

    assert wait_for(lambda: listener.samples.total == 1)
    assert listener.samples.latest().gyroX == 1e-4


def test_callback_errors_do_not_stop_listener(wait_for) -> None:
    seen = []

    def callback(sample, addr):
        seen.append(sample)
        if len(seen) == 1:
            raise RuntimeError("callback failure")

    with DatagramListener("127.0.0.1", 0, callback=callback, poll_interval=0.05) as handle:
        for i in range(2):
            _send(handle.bound_port, encode_sample(SensorSample(float(i), 0, 0, 0, 0, 0)))
        assert wait_for(lambda: len(seen) == 2)
        assert handle.is_alive()
    assert not handle.is_alive()


def test_received_samples_to_array_and_capacity() -> None:
    store = ReceivedSamples(capacity=2)
    assert store.to_array().shape == (0, 6)

    for i in range(3):
        store.append(SensorSample(float(i), 1.0, 2.0, 3.0, 4.0, 5.0))

    assert len(store) == 2
    assert store.total == 3
    np.testing.assert_allclose(
        store.to_array(),
        np.array([[1.0, 1.0, 2.0, 3.0, 4.0, 5.0], [2.0, 1.0, 2.0, 3.0, 4.0, 5.0]]),
    )


class _UnbindableSocket:
    instances: list = []

    def __init__(self, *args) -> None:
        self.closed = False
        _UnbindableSocket.instances.append(self)

    def setsockopt(self, *args) -> None:
        pass

    def bind(self, address) -> None:
        raise OSError(98, "Address already in use")

    def close(self) -> None:
        self.closed = True


def test_bind_failure_closes_socket(monkeypatch) -> None:
    _UnbindableSocket.instances = []
    monkeypatch.setattr(listener_module.socket, "socket", _UnbindableSocket)
    receiver = DatagramListener("127.0.0.1", 1593)

    with pytest.raises(OSError):
        receiver.start()

    assert len(_UnbindableSocket.instances) == 1
    assert _UnbindableSocket.instances[0].closed is True
    assert receiver.bound_port is None
    assert receiver.is_alive() is False


def test_receive_loop_without_socket_returns() -> None:
    receiver = DatagramListener("127.0.0.1", 0)

    receiver._receive_loop()

    assert len(receiver.samples) == 0
