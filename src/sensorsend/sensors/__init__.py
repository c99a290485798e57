"""Sensor channel definitions and raw event sources.

:mod:`channels` names the two motion channels (gravity, gyroscope) and
parses raw readings from text lines; :mod:`synthetic` produces a fake
stream of readings for demos and load tests when no device is attached.
"""
