"""Configuration objects and helpers for SensorSend.

Settings live in a small YAML file (see ``config/sensorsend.example.yaml``)
and are loaded into the typed :class:`SensorSendConfig` dataclass from
:mod:`runtime`, which the CLI and :func:`sensorsend.core.build_streamer`
consume.
"""

from .runtime import SensorSendConfig, config_from_mapping, load_config

__all__ = ["SensorSendConfig", "config_from_mapping", "load_config"]
