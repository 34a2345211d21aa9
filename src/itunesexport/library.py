"""In-memory iTunes library: tracks, playlists and the XML loader."""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

log = structlog.get_logger(__name__)


class LibraryLoadError(Exception):
    """The library file is missing, unreadable or not an iTunes library."""


class Track(BaseModel):
    """A single media item as stored in the library."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    track_id: int = Field(alias="Track ID")
    name: str = Field(default="", alias="Name")
    artist: str = Field(default="", alias="Artist")
    total_time: int = Field(default=0, alias="Total Time", description="Duration in milliseconds")
    location: str = Field(default="", alias="Location")


class Playlist(BaseModel):
    """A named, ordered list of track identifiers."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(alias="Name")
    playlist_id: int | None = Field(default=None, alias="Playlist ID")
    track_ids: tuple[int, ...] = Field(default=(), alias="Playlist Items")
    master: bool = Field(default=False, alias="Master")
    folder: bool = Field(default=False, alias="Folder")
    distinguished_kind: int | None = Field(default=None, alias="Distinguished Kind")

    @field_validator("track_ids", mode="before")
    @classmethod
    def _flatten_items(cls, value: Any) -> Any:
        # The XML stores items as [{"Track ID": 123}, ...].
        if isinstance(value, list | tuple):
            return tuple(item["Track ID"] if isinstance(item, dict) else item for item in value)
        return value

    @property
    def is_user_playlist(self) -> bool:
        return not (self.master or self.folder or self.distinguished_kind is not None)


class Library(BaseModel):
    """Owning collection that resolves playlist items to track records."""

    model_config = ConfigDict(frozen=True)

    tracks: dict[int, Track] = Field(default_factory=dict)
    playlists: tuple[Playlist, ...] = ()

    def tracks_for(self, playlist: Playlist) -> list[Track]:
        """Return the playlist's tracks in playlist order."""
        resolved: list[Track] = []
        for track_id in playlist.track_ids:
            track = self.tracks.get(track_id)
            if track is None:
                log.debug("unknown_track_id", playlist=playlist.name, track_id=track_id)
                continue
            resolved.append(track)
        return resolved

    def find_playlist(self, name: str) -> Playlist | None:
        for playlist in self.playlists:
            if playlist.name == name:
                return playlist
        return None

    def user_playlists(self) -> list[Playlist]:
        """Every playlist except the master list, folders and iTunes-managed lists."""
        return [p for p in self.playlists if p.is_user_playlist]


def load_library(path: Path) -> Library:
    """Parse an ``iTunes Music Library.xml`` file."""
    try:
        with open(path, "rb") as fh:
            raw = plistlib.load(fh)
    except OSError as exc:
        raise LibraryLoadError(f"Could not read library {path}: {exc.strerror or exc}") from exc
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise LibraryLoadError(f"{path} is not a valid iTunes library file: {exc}") from exc

    if not isinstance(raw, dict):
        raise LibraryLoadError(f"{path} is not a valid iTunes library file")

    try:
        tracks = {
            track.track_id: track
            for track in (Track.model_validate(entry) for entry in raw.get("Tracks", {}).values())
        }
        playlists = tuple(Playlist.model_validate(entry) for entry in raw.get("Playlists", []))
    except ValidationError as exc:
        raise LibraryLoadError(f"{path} contains malformed entries: {exc}") from exc

    log.info("library_loaded", path=str(path), tracks=len(tracks), playlists=len(playlists))
    return Library(tracks=tracks, playlists=playlists)
