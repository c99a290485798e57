"""Runtime configuration for the streaming pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)

DEFAULT_HOST = "192.168.0.151"
DEFAULT_PORT = 1593
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(slots=True)
class SensorSendConfig:
    """
    Where to stream and how hard the dispatcher may work.

    The defaults suit two channels at game-rate sampling (~50 Hz each)
    sent to a receiver on the local network.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    autoconnect: bool = False

    # Worker pool sizing
    max_workers: int = 2
    max_pending: int = 256

    log_level: str = "INFO"

    def sanitized(self) -> SensorSendConfig:
        """Return a copy with derived limits applied."""
        level = str(self.log_level).strip().upper()
        if level not in _LOG_LEVELS:
            level = "INFO"
        return SensorSendConfig(
            host=str(self.host or "").strip(),
            port=min(65535, max(1, int(self.port))),
            autoconnect=bool(self.autoconnect),
            max_workers=max(1, int(self.max_workers)),
            max_pending=max(1, int(self.max_pending)),
            log_level=level,
        )


_SECTIONS = ("streaming", "dispatcher")


def _flatten_sections(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge the optional ``streaming:`` and ``dispatcher:`` blocks into one
    flat mapping. Keys inside a block win over the same key at top level.
    """
    flat = {key: value for key, value in data.items() if key not in _SECTIONS}
    for section in _SECTIONS:
        block = data.get(section)
        if block is None:
            continue
        if not isinstance(block, Mapping):
            raise ValueError(f"'{section}' must be a mapping, got {type(block).__name__}")
        flat.update(block)
    return flat


def config_from_mapping(data: Mapping[str, Any] | None) -> SensorSendConfig:
    """Build a sanitized :class:`SensorSendConfig` from parsed YAML."""
    if not data:
        return SensorSendConfig()
    flat = _flatten_sections(data)
    known = {f.name for f in fields(SensorSendConfig)}
    ignored = sorted(str(key) for key in flat if key not in known)
    if ignored:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(ignored))
    try:
        return SensorSendConfig(**{k: v for k, v in flat.items() if k in known}).sanitized()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid sensorsend configuration: {exc}") from exc


def _apply_env_overrides(cfg: SensorSendConfig, environ: Mapping[str, str]) -> SensorSendConfig:
    """``SENSORSEND_HOST`` and ``SENSORSEND_PORT`` beat the file values."""
    env_host = environ.get("SENSORSEND_HOST")
    if env_host:
        cfg.host = env_host
    env_port = environ.get("SENSORSEND_PORT")
    if env_port:
        try:
            cfg.port = int(env_port)
        except ValueError as exc:
            raise ValueError(f"SENSORSEND_PORT must be an integer, got {env_port!r}") from exc
    return cfg.sanitized()


def load_config(
    path: str | Path | None,
    *,
    environ: Mapping[str, str] | None = None,
) -> SensorSendConfig:
    """
    Load configuration from ``path`` and apply environment overrides.

    A missing or unset path means defaults. ``environ`` defaults to
    :data:`os.environ`.
    """
    cfg = SensorSendConfig()
    if path is not None:
        cfg_path = Path(path).expanduser()
        if cfg_path.exists():
            with cfg_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            if not isinstance(raw, Mapping):
                raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
            cfg = config_from_mapping(raw)
        else:
            logger.debug("Config file %s not found; using defaults", cfg_path)
    return _apply_env_overrides(cfg, os.environ if environ is None else environ)


__all__ = ["DEFAULT_HOST", "SensorSendConfig", "config_from_mapping", "load_config"]
