"""Tests for the top-level CLI wiring."""

import json

from typer.testing import CliRunner

from flowtask import __version__
from flowtask.main import app

runner = CliRunner()


class TestMainApp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "parse" in result.output
        assert "format" in result.output
        assert "add" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_parse_subcommand(self):
        result = runner.invoke(
            app, ["parse", "every other friday payday", "--json", "--now", "2026-10-16T10:00+00:00"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["recurrence"]["dayOfWeek"] == 5

    def test_format_subcommand(self):
        result = runner.invoke(app, ["format", "-f", "weekends", "-t", "10:00"])
        assert result.exit_code == 0
        assert "Weekends at 10:00 AM" in result.output

    def test_config_group(self):
        result = runner.invoke(app, ["config", "get", "recurrence.default_time"])
        assert result.exit_code == 0
        assert "09:00" in result.output

    def test_typo_suggestion(self):
        result = runner.invoke(app, ["prase", "daily walk"])
        assert result.exit_code == 1
        assert "Did you mean this?" in result.output
        assert "parse" in result.output
