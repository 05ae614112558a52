from __future__ import annotations

from typing import Optional

from prometheus_client import CollectorRegistry

from aeron_exporter.core.cnc import CncFileReader
from aeron_exporter.core.collector import AeronCollector


def build_registry(cnc_file_reader: Optional[CncFileReader] = None) -> CollectorRegistry:
    """
    Fresh registry holding only the Aeron collector.

    The process-wide default registry is not used, so each app (and each test)
    scrapes exactly the collectors it was built with.
    """
    registry = CollectorRegistry()
    registry.register(AeronCollector(cnc_file_reader or CncFileReader()))
    return registry
