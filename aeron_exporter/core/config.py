"""
Process configuration, read from the environment.

    AERON_EXPORTER_PORT       listening port (required)
    AERON_EXPORTER_HOST       bind address, default 0.0.0.0
    AERON_DIR                 Aeron directory holding cnc.dat (optional)
    AERON_EXPORTER_LOG_LEVEL  root log level, default INFO
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from aeron_exporter.core.cnc.descriptor import AERON_DIR_ENV

PORT_ENV = "AERON_EXPORTER_PORT"
HOST_ENV = "AERON_EXPORTER_HOST"
LOG_LEVEL_ENV = "AERON_EXPORTER_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ExporterSettings:
    port: int
    host: str = "0.0.0.0"
    aeron_dir: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExporterSettings":
        env = os.environ if environ is None else environ

        raw_port = (env.get(PORT_ENV) or "").strip()
        if not raw_port:
            raise ConfigError(f"Port number expected in {PORT_ENV}")
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"Wrong format for port number: {raw_port!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"Port number out of range: {port}")

        host = (env.get(HOST_ENV) or "0.0.0.0").strip()
        aeron_dir = (env.get(AERON_DIR_ENV) or "").strip() or None

        log_level = (env.get(LOG_LEVEL_ENV) or "INFO").strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level {log_level!r}, expected one of {', '.join(_LOG_LEVELS)}")

        return cls(port=port, host=host, aeron_dir=aeron_dir, log_level=log_level)
