"""
Exports Aeron cnc.dat counters as an HTTP endpoint for Prometheus to poll.

Expects the web server port in AERON_EXPORTER_PORT.
"""
from __future__ import annotations

import logging
import sys

from aeron_exporter.core.config import ConfigError, ExporterSettings

log = logging.getLogger("aeron_exporter.main")


def main() -> int:
    try:
        settings = ExporterSettings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        log.error("Invalid configuration: %s", e)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    import uvicorn

    from aeron_exporter.api.main import create_app
    from aeron_exporter.core.cnc import CncFileReader

    reader = CncFileReader(settings.aeron_dir)
    log.info("Starting Aeron Exporter on %s:%d, cnc file %s", settings.host, settings.port, reader.cnc_path)
    app = create_app(cnc_file_reader=reader)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    finally:
        log.info("Aeron Exporter is shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
