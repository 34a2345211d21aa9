"""Export module: format registry, location handling and the export driver."""

from itunesexport.export.engine import (
    ExportObserver,
    ExportRequest,
    ExportResult,
    LoggingObserver,
    PlaylistResult,
    Skipped,
    Written,
    export_playlists,
    render_playlist,
    write_playlist,
)
from itunesexport.export.errors import (
    ExportError,
    FileOpenError,
    LocationDecodeError,
    UnsupportedFormatError,
    WriteError,
)
from itunesexport.export.formats import ExportFormat, FormatDescriptor, resolve
from itunesexport.export.location import normalize_location

__all__ = [
    "ExportError",
    "ExportFormat",
    "ExportObserver",
    "ExportRequest",
    "ExportResult",
    "FileOpenError",
    "FormatDescriptor",
    "LocationDecodeError",
    "LoggingObserver",
    "PlaylistResult",
    "Skipped",
    "UnsupportedFormatError",
    "WriteError",
    "Written",
    "export_playlists",
    "normalize_location",
    "render_playlist",
    "resolve",
    "write_playlist",
]
