"""Export driver: writes each requested playlist to its own file."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol, TextIO

import structlog
from pydantic import BaseModel, ConfigDict, Field

from itunesexport.export.errors import FileOpenError, LocationDecodeError, WriteError
from itunesexport.export.formats import ExportFormat, FormatDescriptor, resolve
from itunesexport.export.location import normalize_location
from itunesexport.library import Library, Playlist, Track

log = structlog.get_logger(__name__)


class ExportRequest(BaseModel):
    """Everything one export run needs.  Immutable once built."""

    model_config = ConfigDict(frozen=True)

    library: Library
    playlists: tuple[Playlist, ...]
    export_format: ExportFormat | int = ExportFormat.SIMPLE_LIST
    output_dir: Path = Path(".")
    extension: str = Field(default="", description="File extension without the leading dot")
    windows_paths: bool = Field(default_factory=lambda: os.name == "nt")
    exported_at: datetime | None = None

    @property
    def file_extension(self) -> str:
        ext = self.extension.lstrip(".")
        if ext:
            return ext
        try:
            return ExportFormat(self.export_format).default_extension
        except ValueError:
            return "m3u"

    def path_for(self, playlist: Playlist) -> Path:
        return self.output_dir / f"{playlist.name}.{self.file_extension}"


# ---------------------------------------------------------------------------
# Per-track and per-run results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Written:
    track: Track
    location: str


@dataclass(frozen=True)
class Skipped:
    track: Track
    reason: str


TrackOutcome = Written | Skipped


@dataclass
class PlaylistResult:
    playlist: Playlist
    path: Path | None = None
    outcomes: list[TrackOutcome] = field(default_factory=list)

    @property
    def written(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Written))

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Skipped))


@dataclass
class ExportResult:
    playlists: list[PlaylistResult] = field(default_factory=list)

    @property
    def tracks_written(self) -> int:
        return sum(p.written for p in self.playlists)

    @property
    def tracks_skipped(self) -> int:
        return sum(p.skipped for p in self.playlists)


# ---------------------------------------------------------------------------
# Observers
# ---------------------------------------------------------------------------


class ExportObserver(Protocol):
    """Receives progress notifications from an export run."""

    def playlist_started(self, playlist: Playlist, path: Path) -> None: ...

    def track_skipped(self, playlist: Playlist, skipped: Skipped) -> None: ...

    def export_completed(self, result: ExportResult) -> None: ...


class LoggingObserver:
    """Default observer: reports progress as structlog events."""

    def playlist_started(self, playlist: Playlist, path: Path) -> None:
        log.info("playlist_export_start", playlist=playlist.name, path=str(path))

    def track_skipped(self, playlist: Playlist, skipped: Skipped) -> None:
        log.warning(
            "track_skipped",
            playlist=playlist.name,
            track=skipped.track.name,
            reason=skipped.reason,
        )

    def export_completed(self, result: ExportResult) -> None:
        log.info(
            "export_completed",
            playlists=len(result.playlists),
            written=result.tracks_written,
            skipped=result.tracks_skipped,
        )


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def write_playlist(
    out: TextIO,
    request: ExportRequest,
    playlist: Playlist,
    descriptor: FormatDescriptor,
    observer: ExportObserver | None = None,
) -> PlaylistResult:
    """Write one playlist onto *out*: header, one entry per track, footer.

    Tracks whose location cannot be decoded are recorded as
    :class:`Skipped`; every other failure propagates.
    """
    result = PlaylistResult(playlist=playlist)
    descriptor.header(out, request, playlist)

    for track in request.library.tracks_for(playlist):
        try:
            location = normalize_location(track.location, windows_paths=request.windows_paths)
        except LocationDecodeError as exc:
            skipped = Skipped(track=track, reason=str(exc))
            result.outcomes.append(skipped)
            if observer is not None:
                observer.track_skipped(playlist, skipped)
            continue

        descriptor.entry(out, request, playlist, track, location)
        result.outcomes.append(Written(track=track, location=location))

    descriptor.footer(out, request, playlist)
    return result


def render_playlist(request: ExportRequest, playlist: Playlist) -> str:
    """Return the exported text of *playlist* without touching the filesystem."""
    buf = io.StringIO()
    write_playlist(buf, request, playlist, resolve(request.export_format))
    return buf.getvalue()


def export_playlists(request: ExportRequest, observer: ExportObserver | None = None) -> ExportResult:
    """Export every playlist in *request* to ``<output_dir>/<name>.<extension>``.

    Stops at the first fatal error; files already written stay in place and
    the file being written is closed but not removed.
    """
    observer = observer if observer is not None else LoggingObserver()
    result = ExportResult()

    for playlist in request.playlists:
        descriptor = resolve(request.export_format)
        path = request.path_for(playlist)
        observer.playlist_started(playlist, path)

        try:
            fh = open(path, "w", encoding="utf-8", errors="surrogateescape", newline="")
        except OSError as exc:
            raise FileOpenError(path, exc.strerror or str(exc)) from exc

        try:
            with fh:
                playlist_result = write_playlist(fh, request, playlist, descriptor, observer)
        except OSError as exc:
            raise WriteError(path, exc.strerror or str(exc)) from exc

        playlist_result.path = path
        result.playlists.append(playlist_result)
        log.debug(
            "playlist_written",
            playlist=playlist.name,
            written=playlist_result.written,
            skipped=playlist_result.skipped,
        )

    observer.export_completed(result)
    return result
