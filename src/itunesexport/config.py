"""Configuration management for iTunes Export."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Product identity (written into Simple List headers)
# ---------------------------------------------------------------------------

PRODUCT_NAME = "iTunes Export"
PRODUCT_VERSION = "0.4.0"
PRODUCT_URL = "http://www.ericdaugherty.com/dev/itunesexport/"

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

_BASE_DIR_NAME = ".itunesexport"
_CONFIG_FILE = "config.toml"
_LOG_DIR = "logs"


def get_base_dir() -> Path:
    """Return the directory holding the config file and logs (~/.itunesexport/)."""
    return Path.home() / _BASE_DIR_NAME


# ---------------------------------------------------------------------------
# Config models
# ---------------------------------------------------------------------------

FormatName = Literal["m3u", "ext", "wpl", "zpl"]
PathStyle = Literal["auto", "windows", "posix"]


class ExportConfig(BaseModel):
    """Defaults for the ``export`` command."""

    format: FormatName = Field(default="m3u", description="Playlist format: m3u, ext, wpl or zpl")
    extension: str = Field(default="", description="File extension; empty uses the format's own")
    output_dir: str = Field(default=".", description="Directory the playlist files are written to")
    path_style: PathStyle = Field(
        default="auto",
        description="Location style: windows strips the leading slash, auto follows the host",
    )
    library: str = Field(default="", description="Path to 'iTunes Music Library.xml'")

    def windows_paths(self) -> bool:
        if self.path_style == "auto":
            return os.name == "nt"
        return self.path_style == "windows"


class LoggingConfig(BaseModel):
    log_level: str = Field(default="info", description="Logging level")
    log_to_file: bool = Field(default=True, description="Write rotating log files under the base dir")


class AppConfig(BaseModel):
    """Top-level application configuration."""

    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def base_dir(self) -> Path:
        return get_base_dir()

    @property
    def log_dir(self) -> Path:
        return self.base_dir / _LOG_DIR


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def config_path() -> Path:
    return get_base_dir() / _CONFIG_FILE


def load_config() -> AppConfig:
    """Load configuration from TOML, falling back to defaults if the file is missing."""
    path = config_path()
    if not path.is_file():
        return AppConfig()

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    return AppConfig.model_validate(raw)


def _toml_literal(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    msg = f"Unsupported TOML value type: {type(value)}"
    raise TypeError(msg)


def dump_toml(config: AppConfig) -> str:
    """Serialize *config* as TOML (one table per section, scalar values only)."""
    lines: list[str] = []
    for section_name, section in config.model_dump(mode="python").items():
        lines.append(f"[{section_name}]")
        for key, value in section.items():
            lines.append(f"{key} = {_toml_literal(value)}")
        lines.append("")
    return "\n".join(lines)


def save_config(config: AppConfig) -> Path:
    """Write *config* to disk, readable by the owner only."""
    base = get_base_dir()
    base.mkdir(mode=0o700, parents=True, exist_ok=True)
    path = config_path()
    path.write_text(dump_toml(config), encoding="utf-8")
    os.chmod(path, 0o600)
    return path
