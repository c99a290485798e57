from __future__ import annotations

import pytest

from sensorsend.core.models import DEFAULT_PORT, Endpoint
from sensorsend.core.session import BlankAddressError, ConnectionSession


def test_new_session_is_disconnected() -> None:
    session = ConnectionSession()

    assert not session.connected
    assert session.endpoint is None
    assert session.port == DEFAULT_PORT == 1593


def test_connect_sets_endpoint() -> None:
    session = ConnectionSession()

    endpoint = session.connect(" 192.168.0.10 ")

    assert endpoint == Endpoint("192.168.0.10", 1593)
    assert session.connected
    assert session.endpoint == endpoint
    assert str(endpoint) == "192.168.0.10:1593"


def test_blank_connect_twice_stays_disconnected() -> None:
    session = ConnectionSession()

    for address in ("", "   "):
        with pytest.raises(BlankAddressError):
            session.connect(address)

    assert not session.connected
    assert session.host is None


def test_blank_connect_while_connected_keeps_address() -> None:
    session = ConnectionSession()
    session.connect("10.0.0.5")

    with pytest.raises(BlankAddressError):
        session.connect("")

    assert session.connected
    assert session.host == "10.0.0.5"


def test_reconnect_redirects_endpoint() -> None:
    session = ConnectionSession(port=5000)
    session.connect("10.0.0.5")
    session.connect("10.0.0.6")

    assert session.endpoint == Endpoint("10.0.0.6", 5000)


def test_disconnect_hides_endpoint_but_keeps_host() -> None:
    session = ConnectionSession()
    session.connect("10.0.0.5")

    session.disconnect()

    assert not session.connected
    assert session.endpoint is None
    assert session.host == "10.0.0.5"


def test_socket_created_lazily_and_reused(socket_factory) -> None:
    session = ConnectionSession(socket_factory=socket_factory)
    assert socket_factory.created == []

    session.send_datagram(b"a", ("127.0.0.1", 1593))
    session.send_datagram(b"b", ("127.0.0.1", 1593))

    assert len(socket_factory.created) == 1
    assert socket_factory.sent == [(b"a", ("127.0.0.1", 1593)), (b"b", ("127.0.0.1", 1593))]


def test_close_releases_socket_and_disconnects(socket_factory) -> None:
    session = ConnectionSession(socket_factory=socket_factory)
    session.connect("10.0.0.5")
    session.send_datagram(b"a", ("10.0.0.5", 1593))

    session.close()

    assert socket_factory.created[0].closed
    assert not session.connected

    session.send_datagram(b"b", ("10.0.0.5", 1593))
    assert len(socket_factory.created) == 2
