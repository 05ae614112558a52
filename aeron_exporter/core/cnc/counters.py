from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterator, Optional

from aeron_exporter.core.cnc.descriptor import (
    CACHE_LINE_LENGTH,
    INT32,
    INT64,
    SIZE_OF_INT,
    CncMetadata,
)
from aeron_exporter.core.cnc.errors import CncFileError

# Counters metadata record
RECORD_UNUSED = 0
RECORD_ALLOCATED = 1
RECORD_RECLAIMED = -1

TYPE_ID_OFFSET = SIZE_OF_INT
LABEL_OFFSET = CACHE_LINE_LENGTH * 2
FULL_LABEL_LENGTH = CACHE_LINE_LENGTH * 6
MAX_LABEL_LENGTH = FULL_LABEL_LENGTH - SIZE_OF_INT
METADATA_LENGTH = LABEL_OFFSET + FULL_LABEL_LENGTH

# Counters values record
COUNTER_LENGTH = CACHE_LINE_LENGTH * 2

# Type id the media driver assigns to its own process-wide counters
SYSTEM_COUNTER_TYPE_ID = 0


@dataclass(frozen=True)
class CounterRecord:
    counter_id: int
    type_id: int
    label: str
    value: int


class CountersReader:
    """
    Read-only view over a copy of the counters metadata and values buffers.

    The copy is taken by CncFileReader.open(), so later writes, truncation or
    replacement of cnc.dat cannot affect an iteration in progress. Records are
    yielded in counter id order.
    """

    def __init__(self, metadata_buffer: bytes, values_buffer: bytes, metadata: CncMetadata) -> None:
        self._metadata_buffer: Optional[bytes] = metadata_buffer
        self._values_buffer: Optional[bytes] = values_buffer
        self.metadata = metadata
        self.max_counter_id = len(values_buffer) // COUNTER_LENGTH - 1

    def __enter__(self) -> "CountersReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[CounterRecord]:
        return self.for_each()

    @property
    def closed(self) -> bool:
        return self._metadata_buffer is None

    def close(self) -> None:
        self._metadata_buffer = None
        self._values_buffer = None

    def for_each(self) -> Iterator[CounterRecord]:
        counter_id = 0
        offset = 0
        while offset + METADATA_LENGTH <= len(self._meta()) and counter_id <= self.max_counter_id:
            state = self._read(self._meta(), INT32, offset)
            if state == RECORD_UNUSED:
                break
            if state == RECORD_ALLOCATED:
                yield CounterRecord(
                    counter_id=counter_id,
                    type_id=self._read(self._meta(), INT32, offset + TYPE_ID_OFFSET),
                    label=self._label_at(offset),
                    value=self.counter_value(counter_id),
                )
            counter_id += 1
            offset += METADATA_LENGTH

    def counter_value(self, counter_id: int) -> int:
        self._validate_counter_id(counter_id)
        return self._read(self._values(), INT64, counter_id * COUNTER_LENGTH)

    def counter_label(self, counter_id: int) -> str:
        self._validate_counter_id(counter_id)
        return self._label_at(counter_id * METADATA_LENGTH)

    def _validate_counter_id(self, counter_id: int) -> None:
        if counter_id < 0 or counter_id > self.max_counter_id:
            raise ValueError(f"counter id {counter_id} out of range: 0 - {self.max_counter_id}")

    def _label_at(self, record_offset: int) -> str:
        meta = self._meta()
        length = self._read(meta, INT32, record_offset + LABEL_OFFSET)
        length = max(0, min(length, MAX_LABEL_LENGTH))
        start = record_offset + LABEL_OFFSET + SIZE_OF_INT
        return meta[start:start + length].decode("ascii", errors="replace")

    def _meta(self) -> bytes:
        if self._metadata_buffer is None:
            raise CncFileError("counters reader is closed")
        return self._metadata_buffer

    def _values(self) -> bytes:
        if self._values_buffer is None:
            raise CncFileError("counters reader is closed")
        return self._values_buffer

    @staticmethod
    def _read(buf: bytes, fmt: struct.Struct, offset: int) -> int:
        try:
            return fmt.unpack_from(buf, offset)[0]
        except struct.error as e:
            raise CncFileError(f"failed to read counters at offset {offset}: {e}") from e
