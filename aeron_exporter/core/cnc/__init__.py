from .counters import SYSTEM_COUNTER_TYPE_ID, CounterRecord, CountersReader
from .errors import CncFileError, CncFileNotFoundError, CncVersionError
from .reader import CncFileReader

__all__ = [
    "CncFileError",
    "CncFileNotFoundError",
    "CncFileReader",
    "CncVersionError",
    "CounterRecord",
    "CountersReader",
    "SYSTEM_COUNTER_TYPE_ID",
]
