"""Receiving side of the sensor stream (decode and inspect datagrams)."""

from .listener import DatagramListener, ReceivedSamples

__all__ = ["DatagramListener", "ReceivedSamples"]
