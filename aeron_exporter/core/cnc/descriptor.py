"""
Layout of the Aeron command-and-control file (cnc.dat).

The media driver writes cnc.dat in native (little-endian) byte order:

    +--------------------------------+  0
    | metadata header (128 bytes)    |
    +--------------------------------+  META_DATA_LENGTH
    | to-driver buffer               |
    +--------------------------------+
    | to-clients buffer              |
    +--------------------------------+
    | counters metadata buffer       |  METADATA_LENGTH bytes per counter
    +--------------------------------+
    | counters values buffer         |  COUNTER_LENGTH bytes per counter
    +--------------------------------+
    | error log buffer               |
    +--------------------------------+

Only the header and the two counters buffers are consumed here.
"""
from __future__ import annotations

import getpass
import os
import struct
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

CNC_FILE = "cnc.dat"
AERON_DIR_ENV = "AERON_DIR"

SIZE_OF_INT = 4
SIZE_OF_LONG = 8
CACHE_LINE_LENGTH = 64

# Header field offsets
CNC_VERSION_FIELD_OFFSET = 0
TO_DRIVER_BUFFER_LENGTH_FIELD_OFFSET = 4
TO_CLIENTS_BUFFER_LENGTH_FIELD_OFFSET = 8
COUNTERS_METADATA_BUFFER_LENGTH_FIELD_OFFSET = 12
COUNTERS_VALUES_BUFFER_LENGTH_FIELD_OFFSET = 16
CLIENT_LIVENESS_TIMEOUT_FIELD_OFFSET = 24
START_TIMESTAMP_FIELD_OFFSET = 32
PID_FIELD_OFFSET = 40
END_OF_METADATA_OFFSET = PID_FIELD_OFFSET + SIZE_OF_LONG

META_DATA_LENGTH = 128

INT32 = struct.Struct("<i")
INT64 = struct.Struct("<q")


def compose_version(major: int, minor: int, patch: int) -> int:
    return ((major & 0xFF) << 16) | ((minor & 0xFF) << 8) | (patch & 0xFF)


def version_major(version: int) -> int:
    return (version >> 16) & 0xFF


def version_to_string(version: int) -> str:
    return f"{version_major(version)}.{(version >> 8) & 0xFF}.{version & 0xFF}"


CNC_VERSION = compose_version(0, 2, 0)


def is_compatible_version(version: int) -> bool:
    # zero means the driver has not finished initialising the file
    if version == 0:
        return False
    return version_major(version) == version_major(CNC_VERSION)


@dataclass(frozen=True)
class CncMetadata:
    version: int
    to_driver_buffer_length: int
    to_clients_buffer_length: int
    counters_metadata_buffer_length: int
    counters_values_buffer_length: int
    client_liveness_timeout_ns: int
    start_timestamp_ms: int
    pid: int

    @property
    def counters_metadata_offset(self) -> int:
        return META_DATA_LENGTH + self.to_driver_buffer_length + self.to_clients_buffer_length

    @property
    def counters_values_offset(self) -> int:
        return self.counters_metadata_offset + self.counters_metadata_buffer_length


def default_aeron_dir() -> str:
    """Mirror the media driver's default: /dev/shm on Linux, tmp elsewhere."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "default"

    if sys.platform.startswith("linux") and os.path.isdir("/dev/shm"):
        base = "/dev/shm"
    else:
        base = tempfile.gettempdir()
    return os.path.join(base, f"aeron-{user}")


def resolve_aeron_dir(aeron_dir: Optional[str] = None) -> Path:
    if aeron_dir:
        return Path(aeron_dir)
    env_dir = (os.getenv(AERON_DIR_ENV) or "").strip()
    if env_dir:
        return Path(env_dir)
    return Path(default_aeron_dir())
