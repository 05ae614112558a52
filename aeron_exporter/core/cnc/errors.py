from __future__ import annotations


class CncFileError(OSError):
    """Control file could not be read as counter data."""


class CncFileNotFoundError(CncFileError, FileNotFoundError):
    """cnc.dat is absent from the resolved Aeron directory."""


class CncVersionError(CncFileError):
    """cnc.dat carries a version this exporter does not understand."""
