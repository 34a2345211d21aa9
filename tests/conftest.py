"""Shared fixtures for iTunes Export tests."""

from __future__ import annotations

import logging
import plistlib
from pathlib import Path

import pytest
import structlog

from itunesexport.library import Library, Playlist, Track


@pytest.fixture()
def base_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the config file and logs to a temporary directory."""
    fake_base = tmp_path / ".itunesexport"
    fake_base.mkdir()
    monkeypatch.setattr("itunesexport.config.get_base_dir", lambda: fake_base)
    return fake_base


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()


def _track(track_id: int, name: str, artist: str, total_time: int, location: str = "") -> Track:
    return Track(
        track_id=track_id,
        name=name,
        artist=artist,
        total_time=total_time,
        location=location or f"file://localhost/Music/{name.replace(' ', '%20')}.mp3",
    )


@pytest.fixture()
def library() -> Library:
    tracks = [
        _track(1, "Back In Black", "AC/DC", 255000),
        _track(2, "So What", "Miles Davis", 562000),
        _track(3, "Broken", "Nobody", 1000, location="file://localhost/Music/100%.mp3"),
        _track(4, "Take Five", "Dave Brubeck", 185500),
    ]
    playlists = (
        Playlist(name="Library", playlist_id=1, track_ids=(1, 2, 3, 4), master=True),
        Playlist(name="Rock", playlist_id=2, track_ids=(1,)),
        Playlist(name="Jazz", playlist_id=3, track_ids=(2, 4)),
        Playlist(name="Mixed", playlist_id=4, track_ids=(4, 3, 1)),
        Playlist(name="Empty", playlist_id=5),
    )
    return Library(tracks={t.track_id: t for t in tracks}, playlists=playlists)


@pytest.fixture()
def library_xml(tmp_path: Path) -> Path:
    """A minimal ``iTunes Music Library.xml`` on disk."""
    data = {
        "Major Version": 1,
        "Minor Version": 1,
        "Tracks": {
            "101": {
                "Track ID": 101,
                "Name": "Paranoid",
                "Artist": "Black Sabbath",
                "Total Time": 168000,
                "Location": "file://localhost/Users/me/Music/Paranoid.mp3",
            },
            "102": {
                "Track ID": 102,
                "Name": "Blue in Green",
                "Artist": "Miles Davis",
                "Total Time": 337500,
                "Location": "file://localhost/Users/me/Music/Blue%20in%20Green.m4a",
            },
        },
        "Playlists": [
            {
                "Name": "Library",
                "Playlist ID": 1,
                "Master": True,
                "Visible": False,
                "Playlist Items": [{"Track ID": 101}, {"Track ID": 102}],
            },
            {"Name": "Music", "Playlist ID": 2, "Distinguished Kind": 4, "Playlist Items": [{"Track ID": 101}]},
            {"Name": "Rock", "Playlist ID": 3, "Playlist Items": [{"Track ID": 101}]},
            {"Name": "Jazz", "Playlist ID": 4, "Playlist Items": [{"Track ID": 102}]},
            {"Name": "Folder", "Playlist ID": 5, "Folder": True},
        ],
    }
    path = tmp_path / "iTunes Music Library.xml"
    with open(path, "wb") as fh:
        plistlib.dump(data, fh)
    return path
