"""Tests for main CLI module."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from cloud_resource_browser import __version__
from cloud_resource_browser.cli.main import app


class TestCLIMain:
    """Test main CLI entry point."""

    @pytest.mark.unit
    def test_help_option(self, cli_runner: CliRunner) -> None:
        """Test --help option lists the commands."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Cloud Resource Browser" in result.stdout
        for command in ("browse", "resources", "profiles", "regions"):
            assert command in result.stdout

    @pytest.mark.unit
    def test_version_option(self, cli_runner: CliRunner) -> None:
        """Test --version option displays version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"crb version {__version__}" in result.stdout

    @pytest.mark.unit
    def test_verbose_flag(self, cli_runner: CliRunner) -> None:
        """Test --verbose flag is accepted."""
        result = cli_runner.invoke(app, ["--verbose", "--help"])
        assert result.exit_code == 0

    @pytest.mark.unit
    def test_unknown_command(self, cli_runner: CliRunner) -> None:
        """Unknown commands fail with a usage error."""
        result = cli_runner.invoke(app, ["explode"])
        assert result.exit_code != 0
