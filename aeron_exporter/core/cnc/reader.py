"""
Reads the Aeron cnc.dat file and exposes its counters.

The Aeron directory is resolved on every open: explicit argument, then the
AERON_DIR environment variable, then the media driver default. Nothing is
cached between calls, so counters registered after the exporter started are
picked up on the next scrape.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from aeron_exporter.core.cnc.counters import CountersReader
from aeron_exporter.core.cnc.descriptor import (
    CLIENT_LIVENESS_TIMEOUT_FIELD_OFFSET,
    CNC_FILE,
    CNC_VERSION,
    CNC_VERSION_FIELD_OFFSET,
    COUNTERS_METADATA_BUFFER_LENGTH_FIELD_OFFSET,
    COUNTERS_VALUES_BUFFER_LENGTH_FIELD_OFFSET,
    END_OF_METADATA_OFFSET,
    INT32,
    INT64,
    META_DATA_LENGTH,
    PID_FIELD_OFFSET,
    START_TIMESTAMP_FIELD_OFFSET,
    TO_CLIENTS_BUFFER_LENGTH_FIELD_OFFSET,
    TO_DRIVER_BUFFER_LENGTH_FIELD_OFFSET,
    CncMetadata,
    is_compatible_version,
    resolve_aeron_dir,
    version_to_string,
)
from aeron_exporter.core.cnc.errors import CncFileError, CncFileNotFoundError, CncVersionError

_log = logging.getLogger("aeron_exporter.cnc")


class CncFileReader:
    def __init__(self, aeron_dir: Optional[str] = None) -> None:
        self._aeron_dir = aeron_dir

    @property
    def cnc_path(self) -> Path:
        return resolve_aeron_dir(self._aeron_dir) / CNC_FILE

    def open(self) -> CountersReader:
        """
        Read cnc.dat and return a CountersReader over its counters.

        The counters metadata and values regions are copied out and the file
        is closed before returning, so no handle outlives the call and a file
        truncated or replaced afterwards cannot disturb the caller.

        Raises:
            CncFileNotFoundError: cnc.dat does not exist.
            CncVersionError: the version field is not one this exporter reads.
            CncFileError: any other failure to read or lay out the file.
        """
        path = self.cnc_path
        if not path.exists():
            raise CncFileNotFoundError(f"CnC file not found: {path}")

        try:
            with open(path, "rb") as f:
                metadata = _read_metadata(f, path)
                counters_meta = _read_exact(
                    f, path, metadata.counters_metadata_offset, metadata.counters_metadata_buffer_length
                )
                counters_values = _read_exact(
                    f, path, metadata.counters_values_offset, metadata.counters_values_buffer_length
                )
        except FileNotFoundError as e:
            # replaced between the existence check and the open
            raise CncFileNotFoundError(f"CnC file not found: {path}") from e
        except CncFileError:
            raise
        except OSError as e:
            raise CncFileError(f"Cannot read CnC file {path}: {e}") from e

        _log.debug(
            "Read %s version=%s pid=%d counters_metadata=%d counters_values=%d",
            path,
            version_to_string(metadata.version),
            metadata.pid,
            metadata.counters_metadata_buffer_length,
            metadata.counters_values_buffer_length,
        )
        return CountersReader(counters_meta, counters_values, metadata)


def _read_exact(f: BinaryIO, path: Path, offset: int, length: int) -> bytes:
    f.seek(offset)
    data = f.read(length)
    if len(data) != length:
        raise CncFileError(
            f"CnC file {path} is truncated: wanted {length} bytes at {offset}, got {len(data)}"
        )
    return data


def _read_metadata(f: BinaryIO, path: Path) -> CncMetadata:
    header = f.read(META_DATA_LENGTH)
    if len(header) < INT32.size:
        raise CncFileError(f"CnC file {path} is truncated ({len(header)} bytes)")

    version = INT32.unpack_from(header, CNC_VERSION_FIELD_OFFSET)[0]
    if not is_compatible_version(version):
        raise CncVersionError(
            f"CnC version not compatible: app={version_to_string(CNC_VERSION)} "
            f"file={version_to_string(version)}"
        )

    if len(header) < END_OF_METADATA_OFFSET:
        raise CncFileError(f"CnC file {path} is truncated ({len(header)} bytes)")

    metadata = CncMetadata(
        version=version,
        to_driver_buffer_length=INT32.unpack_from(header, TO_DRIVER_BUFFER_LENGTH_FIELD_OFFSET)[0],
        to_clients_buffer_length=INT32.unpack_from(header, TO_CLIENTS_BUFFER_LENGTH_FIELD_OFFSET)[0],
        counters_metadata_buffer_length=INT32.unpack_from(header, COUNTERS_METADATA_BUFFER_LENGTH_FIELD_OFFSET)[0],
        counters_values_buffer_length=INT32.unpack_from(header, COUNTERS_VALUES_BUFFER_LENGTH_FIELD_OFFSET)[0],
        client_liveness_timeout_ns=INT64.unpack_from(header, CLIENT_LIVENESS_TIMEOUT_FIELD_OFFSET)[0],
        start_timestamp_ms=INT64.unpack_from(header, START_TIMESTAMP_FIELD_OFFSET)[0],
        pid=INT64.unpack_from(header, PID_FIELD_OFFSET)[0],
    )
    if min(
        metadata.to_driver_buffer_length,
        metadata.to_clients_buffer_length,
        metadata.counters_metadata_buffer_length,
        metadata.counters_values_buffer_length,
    ) < 0:
        raise CncFileError(f"CnC file {path} has negative buffer lengths")
    return metadata
