"""Tests for the structured logging configuration."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
import structlog

from itunesexport.logging import setup_logging


def _flush() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


def test_setup_creates_log_dir_and_files(tmp_path: Path):
    log_dir = tmp_path / "logs"
    setup_logging(log_level="info", log_dir=log_dir)

    structlog.get_logger("itunesexport.test").info("hello")
    _flush()

    assert (log_dir / "itunesexport.log").exists()
    assert (log_dir / "export.log").exists()


def test_main_log_human_readable(tmp_path: Path):
    log_dir = tmp_path / "logs"
    setup_logging(log_level="info", log_dir=log_dir)

    structlog.get_logger("itunesexport.cli").info("test_event", key="value")
    _flush()

    content = (log_dir / "itunesexport.log").read_text()
    assert "test_event" in content
    assert "key=value" in content
    with pytest.raises(json.JSONDecodeError):
        json.loads(content.strip())


def test_export_log_json(tmp_path: Path):
    log_dir = tmp_path / "logs"
    setup_logging(log_level="info", log_dir=log_dir)

    structlog.get_logger("itunesexport.export.engine").info("playlist_export_start", playlist="Rock")
    _flush()

    data = json.loads((log_dir / "export.log").read_text().strip())
    assert data["event"] == "playlist_export_start"
    assert data["playlist"] == "Rock"
    assert data["level"] == "info"
    assert "timestamp" in data


def test_export_log_excludes_other_events(tmp_path: Path):
    log_dir = tmp_path / "logs"
    setup_logging(log_level="info", log_dir=log_dir)

    structlog.get_logger("itunesexport.library").info("library_event")
    structlog.get_logger("itunesexport.export.engine").info("export_event")
    _flush()

    export_content = (log_dir / "export.log").read_text()
    main_content = (log_dir / "itunesexport.log").read_text()
    assert "export_event" in export_content
    assert "library_event" not in export_content
    assert "library_event" in main_content
    assert "export_event" in main_content


def test_level_filtering_suppresses_lower(tmp_path: Path):
    log_dir = tmp_path / "logs"
    setup_logging(log_level="warning", log_dir=log_dir)

    log = structlog.get_logger("itunesexport.test")
    log.info("should_not_appear")
    log.warning("should_appear")
    _flush()

    content = (log_dir / "itunesexport.log").read_text()
    assert "should_not_appear" not in content
    assert "should_appear" in content


def test_rotation_parameters(tmp_path: Path):
    setup_logging(log_level="info", log_dir=tmp_path / "logs")

    rotating = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 2
    for handler in rotating:
        assert handler.maxBytes == 10 * 1024 * 1024
        assert handler.backupCount == 5


def test_no_log_dir_no_handlers():
    setup_logging(log_level="info", log_dir=None)
    assert logging.getLogger().handlers == []
