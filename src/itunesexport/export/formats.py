"""Playlist file formats and the registry that maps a format to its writers.

Every format is described by three writers:

- *header*: written once before the first track
- *entry*: written once per exported track, with its resolved location
- *footer*: written once after the last track

Writers are plain functions; they hold no state between calls and report
failure only by raising.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, TextIO

from itunesexport.config import PRODUCT_NAME, PRODUCT_URL, PRODUCT_VERSION
from itunesexport.export.errors import UnsupportedFormatError

if TYPE_CHECKING:
    from itunesexport.export.engine import ExportRequest
    from itunesexport.library import Playlist, Track

PlaylistWriter = Callable[[TextIO, "ExportRequest", "Playlist"], None]
TrackWriter = Callable[[TextIO, "ExportRequest", "Playlist", "Track", str], None]


class ExportFormat(IntEnum):
    SIMPLE_LIST = 0
    EXTENDED_LIST = 1
    WINDOWS_SEQUENCE = 2
    ZUNE_SEQUENCE = 3

    @property
    def short_name(self) -> str:
        return _SHORT_NAMES[self]

    @property
    def default_extension(self) -> str:
        return _EXTENSIONS[self]

    @classmethod
    def from_name(cls, name: str) -> ExportFormat:
        """Look a format up by its short name (``m3u``, ``ext``, ``wpl``, ``zpl``)."""
        for fmt, short in _SHORT_NAMES.items():
            if short == name.lower():
                return fmt
        raise UnsupportedFormatError(name)


_SHORT_NAMES = {
    ExportFormat.SIMPLE_LIST: "m3u",
    ExportFormat.EXTENDED_LIST: "ext",
    ExportFormat.WINDOWS_SEQUENCE: "wpl",
    ExportFormat.ZUNE_SEQUENCE: "zpl",
}

_EXTENSIONS = {
    ExportFormat.SIMPLE_LIST: "m3u",
    ExportFormat.EXTENDED_LIST: "m3u",
    ExportFormat.WINDOWS_SEQUENCE: "wpl",
    ExportFormat.ZUNE_SEQUENCE: "zpl",
}


@dataclass(frozen=True)
class FormatDescriptor:
    """The header/entry/footer writers for one playlist format."""

    header: PlaylistWriter
    entry: TrackWriter
    footer: PlaylistWriter


def format_timestamp(moment: datetime) -> str:
    """Format as ``YYYY-MM-DD H:MMAM`` (12-hour clock, unpadded hour)."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment:%Y-%m-%d} {hour}:{moment:%M}{meridiem}"


def _no_footer(out: TextIO, request: ExportRequest, playlist: Playlist) -> None:
    return None


# -- M3U --------------------------------------------------------------------


def _m3u_header(out: TextIO, request: ExportRequest, playlist: Playlist) -> None:
    exported = request.exported_at or datetime.now()
    out.write(
        f"# M3U Playlist '{playlist.name}' exported {format_timestamp(exported)} "
        f"by {PRODUCT_NAME} v. {PRODUCT_VERSION} ({PRODUCT_URL})\n"
    )


def _m3u_entry(out: TextIO, request: ExportRequest, playlist: Playlist, track: Track, location: str) -> None:
    out.write(f"{location}\n")


# -- Extended M3U -------------------------------------------------------------


def _ext_header(out: TextIO, request: ExportRequest, playlist: Playlist) -> None:
    out.write("#EXTM3U\n")


def _ext_entry(out: TextIO, request: ExportRequest, playlist: Playlist, track: Track, location: str) -> None:
    seconds = track.total_time // 1000
    out.write(f"#EXTINF:{seconds},{track.artist} - {track.name}\n{location}\n")


# -- WPL / ZPL (SMIL sequences) -------------------------------------------------

_WPL_HEADER = """\
<?wpl version="1.0"?>
<smil>
  <head>
    <author />
    <title>{title}</title>
  </head>
  <body>
    <seq>
"""

_ZPL_HEADER = """\
<?zpl version="1.0"?>
<smil>
  <head>
    <meta name="Generator" content="Zune -- 1.3.5728.0" />
    <author />
    <title>{title}</title>
  </head>
  <body>
    <seq>
"""

_SMIL_FOOTER = """\
    </seq>
  </body>
</smil>
"""


def _wpl_header(out: TextIO, request: ExportRequest, playlist: Playlist) -> None:
    out.write(_WPL_HEADER.format(title=playlist.name))


def _zpl_header(out: TextIO, request: ExportRequest, playlist: Playlist) -> None:
    out.write(_ZPL_HEADER.format(title=playlist.name))


def _smil_entry(out: TextIO, request: ExportRequest, playlist: Playlist, track: Track, location: str) -> None:
    out.write(f"      <media src={location}></media>\n")


def _smil_footer(out: TextIO, request: ExportRequest, playlist: Playlist) -> None:
    out.write(_SMIL_FOOTER)


# -- Registry -----------------------------------------------------------------

_REGISTRY: dict[ExportFormat, FormatDescriptor] = {
    ExportFormat.SIMPLE_LIST: FormatDescriptor(_m3u_header, _m3u_entry, _no_footer),
    ExportFormat.EXTENDED_LIST: FormatDescriptor(_ext_header, _ext_entry, _no_footer),
    ExportFormat.WINDOWS_SEQUENCE: FormatDescriptor(_wpl_header, _smil_entry, _smil_footer),
    ExportFormat.ZUNE_SEQUENCE: FormatDescriptor(_zpl_header, _smil_entry, _smil_footer),
}


def resolve(format_id: ExportFormat | int) -> FormatDescriptor:
    """Return the writers for *format_id*.

    Raises :class:`UnsupportedFormatError` for anything that is not one of
    the :class:`ExportFormat` values.
    """
    if isinstance(format_id, bool) or not isinstance(format_id, int):
        raise UnsupportedFormatError(format_id)
    try:
        return _REGISTRY[ExportFormat(format_id)]
    except (ValueError, KeyError):
        raise UnsupportedFormatError(format_id) from None
