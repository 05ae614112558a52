"""
Prometheus collector for Aeron system counters.

Reads cnc.dat on every scrape and exports the media driver's system counters
as samples of a single untyped "aeron" family. Counter labels are sanitized
to follow https://prometheus.io/docs/practices/naming/. The UNTYPED type is
used as recommended in https://prometheus.io/docs/instrumenting/writing_exporters/
since counters are raw values without asserted semantics.

A failed read never propagates: it is reported as aeron_cncread_error=1.
aeron_exporter_duration_seconds is exported on every scrape.
"""
from __future__ import annotations

import logging
import time
from typing import List

from prometheus_client.core import GaugeMetricFamily, Metric, UnknownMetricFamily
from prometheus_client.registry import Collector

from aeron_exporter.core.cnc import SYSTEM_COUNTER_TYPE_ID, CncFileReader
from aeron_exporter.core.naming import sanitize

log = logging.getLogger("aeron_exporter.collector")

METRIC_NAME = "aeron"
METRIC_HELP = "Aeron CNC system counters"
CNCREAD_ERROR_METRIC = "aeron_cncread_error"
CNCREAD_ERROR_HELP = "Non-zero if cnc file read has failed."
COLLECTOR_DURATION_METRIC = "aeron_exporter_duration_seconds"
COLLECTOR_DURATION_HELP = "Time aeron counters read took, in seconds."


class AeronCollector(Collector):
    def __init__(self, cnc_file_reader: CncFileReader) -> None:
        self.cnc_file_reader = cnc_file_reader

    def collect(self) -> List[Metric]:
        start = time.perf_counter()
        families: List[Metric] = []

        try:
            families.append(self._read_counters())
        except OSError as e:
            log.error("Error during cnc.dat read: %s", e, exc_info=True)
            families.append(GaugeMetricFamily(CNCREAD_ERROR_METRIC, CNCREAD_ERROR_HELP, value=1))
        finally:
            families.append(
                GaugeMetricFamily(
                    COLLECTOR_DURATION_METRIC,
                    COLLECTOR_DURATION_HELP,
                    value=time.perf_counter() - start,
                )
            )
        return families

    def describe(self) -> List[Metric]:
        # Registering must not touch cnc.dat; the "aeron" family is left out
        # because its samples are only known after a read.
        return [
            GaugeMetricFamily(COLLECTOR_DURATION_METRIC, COLLECTOR_DURATION_HELP),
            GaugeMetricFamily(CNCREAD_ERROR_METRIC, CNCREAD_ERROR_HELP),
        ]

    def _read_counters(self) -> Metric:
        family = UnknownMetricFamily(METRIC_NAME, METRIC_HELP)
        with self.cnc_file_reader.open() as counters:
            log.debug("Reading counters of media driver pid=%d", counters.metadata.pid)
            for record in counters:
                # include only the system counters
                if record.type_id == SYSTEM_COUNTER_TYPE_ID:
                    family.add_sample(sanitize(record.label), {}, record.value)
        return family
