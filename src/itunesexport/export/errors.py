"""Error hierarchy for playlist export runs."""

from __future__ import annotations


class ExportError(Exception):
    """Base class for every failure raised by the export engine."""


class UnsupportedFormatError(ExportError):
    """The requested format identifier has no registered writers."""

    def __init__(self, format_id: object) -> None:
        super().__init__(f"Export type not implemented: {format_id!r}")
        self.format_id = format_id


class FileOpenError(ExportError):
    """The destination playlist file could not be created or truncated."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Could not open {path} for writing: {reason}")
        self.path = path


class WriteError(ExportError):
    """A header, entry or footer writer failed."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Could not write to {path}: {reason}")
        self.path = path


class LocationDecodeError(ExportError):
    """A track location is not validly percent-encoded.

    Unlike the other errors this one never aborts a run: the engine records
    the track as skipped and moves on.
    """

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(reason)
        self.location = location
