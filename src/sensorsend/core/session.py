"""Connection state shared between the controlling side and the dispatcher."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable, Optional, Tuple

from .models import DEFAULT_PORT, Endpoint

logger = logging.getLogger(__name__)

SocketFactory = Callable[[], socket.socket]
Address = Tuple[str, int]


class BlankAddressError(ValueError):
    """Raised when connecting without a host address."""


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


class ConnectionSession:
    """
    Owns the target endpoint, the connected flag and the outbound UDP socket.

    The controlling side calls :meth:`connect` / :meth:`disconnect`; the
    dispatcher reads :attr:`endpoint` for every sample and writes through
    :meth:`send_datagram`. The socket is created on first send and shared by
    all background senders.
    """

    def __init__(self, port: int = DEFAULT_PORT, *, socket_factory: Optional[SocketFactory] = None) -> None:
        self._port = int(port)
        self._socket_factory = socket_factory or _udp_socket
        self._host: Optional[str] = None
        self._connected = False
        self._state_lock = threading.Lock()
        self._socket: Optional[socket.socket] = None
        self._socket_lock = threading.Lock()

    # ------------------------------------------------------------------ state
    def connect(self, address: str) -> Endpoint:
        """
        Start streaming to ``address``.

        A blank address raises :class:`BlankAddressError` and leaves the
        current host and connected flag untouched, whether or not the
        session was already connected. Connecting again while connected
        redirects subsequent sends.
        """
        host = (address or "").strip()
        if not host:
            raise BlankAddressError("address must not be blank")
        with self._state_lock:
            self._host = host
            self._connected = True
        logger.info("Streaming sensor data to %s:%d", host, self._port)
        return Endpoint(host, self._port)

    def disconnect(self) -> None:
        with self._state_lock:
            was_connected = self._connected
            self._connected = False
        if was_connected:
            logger.info("Stopped streaming sensor data")

    @property
    def connected(self) -> bool:
        with self._state_lock:
            return self._connected

    @property
    def host(self) -> Optional[str]:
        with self._state_lock:
            return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def endpoint(self) -> Optional[Endpoint]:
        """Current target, or ``None`` while disconnected."""
        with self._state_lock:
            if not self._connected or self._host is None:
                return None
            return Endpoint(self._host, self._port)

    # ------------------------------------------------------------------ socket
    def send_datagram(self, payload: bytes, address: Address) -> int:
        """Write one datagram through the shared socket, creating it if needed."""
        with self._socket_lock:
            if self._socket is None:
                self._socket = self._socket_factory()
                logger.debug("Opened outbound UDP socket")
            return self._socket.sendto(payload, address)

    def close(self) -> None:
        """Disconnect and release the socket."""
        self.disconnect()
        with self._socket_lock:
            sock, self._socket = self._socket, None
        if sock is not None:
            sock.close()
