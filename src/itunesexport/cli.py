"""Command-line interface for iTunes Export."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from itunesexport.config import AppConfig, ExportConfig, load_config, save_config
from itunesexport.export import (
    ExportError,
    ExportFormat,
    ExportRequest,
    ExportResult,
    Skipped,
    export_playlists,
)
from itunesexport.library import Library, LibraryLoadError, Playlist, load_library
from itunesexport.logging import setup_logging

app = typer.Typer(
    name="itunesexport",
    help="Export iTunes library playlists to M3U, extended M3U, WPL and ZPL files.",
    add_completion=False,
)
console = Console()


def main() -> None:
    """Entry point that wraps ``app()`` with a clean KeyboardInterrupt handler."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("Interrupted.")
        raise SystemExit(130) from None


class ConsoleObserver:
    """Prints export progress to the terminal."""

    def playlist_started(self, playlist: Playlist, path: Path) -> None:
        console.print(f"Exporting Playlist {playlist.name}", markup=False, highlight=False)

    def track_skipped(self, playlist: Playlist, skipped: Skipped) -> None:
        console.print(
            f"Skipping Track {skipped.track.name} because an error occured parsing the location: {skipped.reason}",
            style="yellow",
            markup=False,
            highlight=False,
        )

    def export_completed(self, result: ExportResult) -> None:
        console.print("\nExport Complete.")
        summary = f"[dim]{len(result.playlists)} playlist(s), {result.tracks_written} track(s) written"
        if result.tracks_skipped:
            summary += f", {result.tracks_skipped} skipped"
        console.print(summary + "[/dim]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {message}", highlight=False)
    return typer.Exit(1)


def _init_logging(cfg: AppConfig) -> None:
    setup_logging(cfg.logging.log_level, cfg.log_dir if cfg.logging.log_to_file else None)


def _open_library(library: Path | None, cfg: AppConfig) -> Library:
    path = library or (Path(cfg.export.library).expanduser() if cfg.export.library else None)
    if path is None:
        raise _fail("No library given. Pass LIBRARY or set export.library in the config.")
    try:
        return load_library(path)
    except LibraryLoadError as exc:
        raise _fail(str(exc)) from exc


def _select_playlists(lib: Library, names: list[str], include_all: bool) -> list[Playlist]:
    if include_all:
        return list(lib.playlists)
    if not names:
        return lib.user_playlists()

    selected: list[Playlist] = []
    for name in names:
        playlist = lib.find_playlist(name)
        if playlist is None:
            raise _fail(f"Playlist not found: {name}")
        selected.append(playlist)
    return selected


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def export(
    library: Path | None = typer.Argument(None, help="Path to 'iTunes Music Library.xml'"),
    playlist: list[str] | None = typer.Option(None, "--playlist", "-p", help="Playlist to export (repeatable)"),
    include_all: bool = typer.Option(False, "--all", help="Export every playlist, including iTunes-managed ones"),
    fmt: str = typer.Option("", "--format", "-f", help="m3u, ext, wpl or zpl (default: config)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory (default: config)"),
    extension: str = typer.Option("", "--extension", "-e", help="File extension without the dot"),
    path_style: str = typer.Option("", "--path-style", help="auto, windows or posix (default: config)"),
) -> None:
    """Export playlists from an iTunes library, one file per playlist."""
    cfg = load_config()
    _init_logging(cfg)

    try:
        export_format = ExportFormat.from_name(fmt or cfg.export.format)
    except ExportError as exc:
        raise _fail(str(exc)) from exc

    lib = _open_library(library, cfg)
    playlists = _select_playlists(lib, playlist or [], include_all)
    if not playlists:
        console.print("[yellow]No playlists to export.[/yellow]")
        return

    export_cfg = cfg.export
    if path_style:
        try:
            export_cfg = ExportConfig(**{**cfg.export.model_dump(), "path_style": path_style})
        except ValidationError as exc:
            raise _fail(f"Invalid path style: {path_style} (choose from: auto, windows, posix)") from exc

    output_dir = output or Path(cfg.export.output_dir).expanduser()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise _fail(f"Could not create output directory {output_dir}: {exc.strerror or exc}") from exc

    request = ExportRequest(
        library=lib,
        playlists=playlists,
        export_format=export_format,
        output_dir=output_dir,
        extension=extension or cfg.export.extension,
        windows_paths=export_cfg.windows_paths(),
    )

    try:
        export_playlists(request, ConsoleObserver())
    except ExportError as exc:
        raise _fail(str(exc)) from exc


@app.command()
def playlists(
    library: Path | None = typer.Argument(None, help="Path to 'iTunes Music Library.xml'"),
    include_all: bool = typer.Option(False, "--all", help="Include the master list, folders and iTunes-managed lists"),
) -> None:
    """List the playlists in an iTunes library."""
    cfg = load_config()
    lib = _open_library(library, cfg)

    shown = lib.playlists if include_all else lib.user_playlists()
    if not shown:
        console.print("[dim]No playlists.[/dim]")
        return

    for item in shown:
        console.print(f"  {item.name}  [dim]({len(item.track_ids)} tracks)[/dim]", highlight=False)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

config_app = typer.Typer(name="config", help="View and modify configuration.", add_completion=False)
app.add_typer(config_app)


@config_app.command(name="show")
def config_show() -> None:
    """Show the current configuration."""
    cfg = load_config()

    console.print("\n[bold]Current Configuration[/bold]")
    for section_name, section in cfg.model_dump(mode="python").items():
        console.print(f"\n[bold cyan]\\[{section_name}][/bold cyan]")
        width = max(len(key) for key in section)
        for key, value in section.items():
            shown = value if value != "" else "[dim](not set)[/dim]"
            console.print(f"  {key:<{width}} = {shown}", highlight=False)
    console.print()


@config_app.command(name="set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. export.format"),
    value: str = typer.Argument(help="New value"),
) -> None:
    """Set a configuration value (e.g. itunesexport config set export.format ext)."""
    parts = key.split(".", maxsplit=1)
    if len(parts) != 2:
        raise _fail("Key must be in section.field format (e.g. export.format).")
    section_name, field_name = parts

    cfg = load_config()
    data = cfg.model_dump(mode="python")
    if section_name not in data:
        raise _fail(f"Unknown section: {section_name} (valid: {', '.join(data)})")
    if field_name not in data[section_name]:
        raise _fail(f"Unknown field: {key} (valid: {', '.join(data[section_name])})")

    data[section_name][field_name] = value
    try:
        updated = AppConfig.model_validate(data)
    except ValidationError as exc:
        raise _fail(f"Invalid value for {key}: {exc.errors()[0]['msg']}") from exc

    save_config(updated)
    console.print(f"[green]Set[/green] {key} = {getattr(getattr(updated, section_name), field_name)}")
