"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from cloud_resource_browser.logging import config as logging_config
from cloud_resource_browser.logging.config import (
    RETENTION_DAYS,
    _cleanup_old_logs,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None]:
    """Detach handlers added by configure_logging after each test."""
    yield
    logging_config._remove_installed_handlers()


def _installed_types() -> list[type[logging.Handler]]:
    return [type(handler) for handler in logging_config._installed_handlers]


def _age(path: Path, days: int) -> None:
    old_time = (datetime.now() - timedelta(days=days)).timestamp()
    os.utime(path, (old_time, old_time))


@pytest.mark.unit
class TestCleanupOldLogs:
    """Tests for _cleanup_old_logs function."""

    def test_missing_log_dir(self, tmp_path: Path) -> None:
        """Nothing happens when the log directory does not exist."""
        with patch.object(logging_config, "LOG_DIR", tmp_path / "absent"):
            _cleanup_old_logs()

    def test_deletes_only_expired_logs(self, tmp_path: Path) -> None:
        """Rotated logs past retention are deleted, recent ones and others kept."""
        expired = tmp_path / "crb.log.2"
        recent = tmp_path / "crb.log"
        unrelated = tmp_path / "notes.txt"
        for path in (expired, recent, unrelated):
            path.write_text("data")
        _age(expired, RETENTION_DAYS + 1)
        _age(unrelated, RETENTION_DAYS + 1)

        with patch.object(logging_config, "LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert not expired.exists()
        assert recent.exists()
        assert unrelated.exists()

    def test_ignores_os_errors(self, tmp_path: Path) -> None:
        """Deletion failures do not propagate."""
        expired = tmp_path / "crb.log.1"
        expired.write_text("data")
        _age(expired, RETENTION_DAYS + 5)

        with (
            patch.object(logging_config, "LOG_DIR", tmp_path),
            patch.object(Path, "unlink", side_effect=OSError("permission denied")),
        ):
            _cleanup_old_logs()


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_console_and_file_handlers(self) -> None:
        """By default both handlers are attached."""
        configure_logging()
        assert _installed_types() == [logging.StreamHandler, RotatingFileHandler]
        assert logging_config.LOG_FILE.parent.exists()

    def test_console_disabled(self) -> None:
        """The terminal UI runs without a stdout handler."""
        configure_logging(console=False)
        assert _installed_types() == [RotatingFileHandler]

    def test_no_handlers(self) -> None:
        """Both outputs can be turned off."""
        configure_logging(console=False, log_file=False)
        assert logging_config._installed_handlers == []

    def test_reconfigure_replaces_handlers(self) -> None:
        """Calling configure_logging again does not stack handlers."""
        configure_logging(log_file=False)
        first = list(logging_config._installed_handlers)
        configure_logging(log_file=False)

        root = logging.getLogger()
        assert len(logging_config._installed_handlers) == 1
        assert first[0] not in root.handlers

    @pytest.mark.parametrize(
        ("kwargs", "level"),
        [
            ({}, logging.WARNING),
            ({"verbose": True}, logging.INFO),
            ({"debug": True}, logging.DEBUG),
            ({"verbose": True, "debug": True}, logging.DEBUG),
        ],
    )
    def test_console_level(self, kwargs: dict[str, bool], level: int) -> None:
        """The console level follows the verbosity flags."""
        configure_logging(log_file=False, **kwargs)
        assert logging_config._installed_handlers[0].level == level

    def test_file_captures_debug(self) -> None:
        """Debug events reach the log file even at the default verbosity."""
        configure_logging(console=False)
        get_logger("test").debug("Loaded catalog", resources=3)
        for handler in logging_config._installed_handlers:
            handler.flush()

        content = logging_config.LOG_FILE.read_text()
        assert "Loaded catalog" in content
        assert '"resources": 3' in content

    def test_json_output(self) -> None:
        """json_output switches the console renderer."""
        configure_logging(json_output=True, log_file=False)
        formatter = logging_config._installed_handlers[0].formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger function."""

    def test_binds_initial_context(self) -> None:
        """Initial context is bound to the returned logger."""
        logger = get_logger("test", resource="ec2-instances")
        assert logger is not None
        assert structlog.get_context(logger)["resource"] == "ec2-instances"

    def test_without_context(self) -> None:
        """A logger is returned without context too."""
        assert get_logger() is not None
