"""Tests for config management commands (view, get, set, reset)."""

import json

from typer.testing import CliRunner

from flowtask.commands.config import app
from flowtask.services.config_service import get_config_service

runner = CliRunner()


class TestHelpFlags:
    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("view", "get", "set", "reset"):
            assert command in result.output


class TestView:
    def test_pretty(self):
        result = runner.invoke(app, ["view"])
        assert result.exit_code == 0, result.output
        assert "recurrence" in result.output
        assert "Default Time" in result.output
        assert "09:00" in result.output

    def test_json(self):
        result = runner.invoke(app, ["view", "--output", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ai"]["model"] == "gpt-4o-mini"


class TestGetSet:
    def test_set_then_get(self):
        result = runner.invoke(app, ["set", "ai.model", "gpt-4o"])
        assert result.exit_code == 0, result.output
        assert "Success" in result.output

        result = runner.invoke(app, ["get", "ai.model"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "gpt-4o"

    def test_set_coerces_values(self):
        runner.invoke(app, ["set", "ai.retry", "5"])
        runner.invoke(app, ["set", "recurrence.collapse_weekday_patterns", "true"])
        config = get_config_service().config
        assert config.ai.retry == 5
        assert config.recurrence.collapse_weekday_patterns is True

    def test_get_unknown(self):
        result = runner.invoke(app, ["get", "nope.nothing"])
        assert result.exit_code == 5

    def test_set_unknown(self):
        result = runner.invoke(app, ["set", "nope.nothing", "1"])
        assert result.exit_code == 5

    def test_set_invalid(self):
        result = runner.invoke(app, ["set", "recurrence.default_time", "7pm"])
        assert result.exit_code == 2
        assert get_config_service().config.recurrence.default_time == "09:00"


class TestReset:
    def test_reset_key(self):
        get_config_service().set("ai.model", "other")
        result = runner.invoke(app, ["reset", "ai.model", "--yes"])
        assert result.exit_code == 0, result.output
        assert get_config_service().config.ai.model == "gpt-4o-mini"

    def test_reset_all_confirmed(self):
        get_config_service().set("output.format", "json")
        result = runner.invoke(app, ["reset"], input="y\n")
        assert result.exit_code == 0
        assert get_config_service().config.output.format == "pretty"

    def test_reset_declined(self):
        get_config_service().set("output.format", "json")
        result = runner.invoke(app, ["reset"], input="n\n")
        assert result.exit_code == 0
        assert get_config_service().config.output.format == "json"

    def test_reset_unknown_key(self):
        result = runner.invoke(app, ["reset", "nope", "-y"])
        assert result.exit_code == 5
