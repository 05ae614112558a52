import struct
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from aeron_exporter.api.main import create_app
from aeron_exporter.core.cnc import CncFileReader
from aeron_exporter.core.cnc.counters import (
    COUNTER_LENGTH,
    LABEL_OFFSET,
    METADATA_LENGTH,
    RECORD_ALLOCATED,
    RECORD_RECLAIMED,
)
from aeron_exporter.core.cnc.descriptor import CNC_FILE, CNC_VERSION, META_DATA_LENGTH

TO_DRIVER_LEN = 256
TO_CLIENTS_LEN = 256
DRIVER_PID = 4242

# (type_id, label, value) as a media driver publishes them
SYSTEM_COUNTERS = [
    (0, "Bytes sent", 1024),
    (0, "Bytes received", 2048),
    (0, "Failed offers to ReceiverProxy", 0),
    (0, "Sender flow control limits, i.e. back-pressure events", 7),
    (0, "Errors", -1),
]


def encode_cnc(counters, version=CNC_VERSION, reclaimed=(), spare_records=2) -> bytes:
    """
    Lay out a cnc.dat image: header, to-driver, to-clients, counters
    metadata, counters values. counters is a list of (type_id, label, value).
    """
    records = len(counters) + spare_records
    meta_len = records * METADATA_LENGTH
    values_len = records * COUNTER_LENGTH

    header = bytearray(META_DATA_LENGTH)
    struct.pack_into("<6i", header, 0, version, TO_DRIVER_LEN, TO_CLIENTS_LEN, meta_len, values_len, 0)
    struct.pack_into("<3q", header, 24, 10_000_000_000, 1_600_000_000_000, DRIVER_PID)

    meta = bytearray(meta_len)
    values = bytearray(values_len)
    for i, (type_id, label, value) in enumerate(counters):
        off = i * METADATA_LENGTH
        state = RECORD_RECLAIMED if i in reclaimed else RECORD_ALLOCATED
        struct.pack_into("<ii", meta, off, state, type_id)
        raw = label.encode("ascii")
        struct.pack_into("<i", meta, off + LABEL_OFFSET, len(raw))
        meta[off + LABEL_OFFSET + 4: off + LABEL_OFFSET + 4 + len(raw)] = raw
        struct.pack_into("<q", values, i * COUNTER_LENGTH, value)

    return bytes(header) + bytes(TO_DRIVER_LEN + TO_CLIENTS_LEN) + bytes(meta) + bytes(values)


@pytest.fixture()
def aeron_dir(tmp_path: Path) -> Path:
    d = tmp_path / "aeron-test"
    d.mkdir()
    return d


@pytest.fixture()
def write_cnc(aeron_dir: Path):
    def _write(counters=SYSTEM_COUNTERS, **kwargs) -> Path:
        path = aeron_dir / CNC_FILE
        path.write_bytes(encode_cnc(counters, **kwargs))
        return path

    return _write


@pytest.fixture()
def cnc_file_reader(aeron_dir: Path) -> CncFileReader:
    return CncFileReader(str(aeron_dir))


@pytest.fixture()
def client(cnc_file_reader):
    return TestClient(create_app(cnc_file_reader=cnc_file_reader))
