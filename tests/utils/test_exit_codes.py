"""Unit tests for flowtask.utils.exit_codes."""

from __future__ import annotations

import pytest

from flowtask.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NETWORK,
    ERROR_NOT_FOUND,
    SUCCESS,
    get_exit_code_description,
    get_exit_code_name,
)


class TestExitCodeConstants:
    def test_values(self):
        assert SUCCESS == 0
        assert ERROR_GENERAL == 1
        assert ERROR_INVALID_ARGS == 2
        assert ERROR_NETWORK == 4
        assert ERROR_NOT_FOUND == 5

    def test_all_constants_are_unique(self):
        codes = [SUCCESS, ERROR_GENERAL, ERROR_INVALID_ARGS, ERROR_NETWORK, ERROR_NOT_FOUND]
        assert len(codes) == len(set(codes))


class TestGetExitCodeName:
    @pytest.mark.parametrize(
        "code, name",
        [
            (SUCCESS, "SUCCESS"),
            (ERROR_GENERAL, "ERROR_GENERAL"),
            (ERROR_INVALID_ARGS, "ERROR_INVALID_ARGS"),
            (ERROR_NETWORK, "ERROR_NETWORK"),
            (ERROR_NOT_FOUND, "ERROR_NOT_FOUND"),
        ],
    )
    def test_known(self, code, name):
        assert get_exit_code_name(code) == name

    def test_unknown(self):
        assert get_exit_code_name(99) == "UNKNOWN(99)"


class TestGetExitCodeDescription:
    def test_known(self):
        assert "success" in get_exit_code_description(SUCCESS).lower()
        assert "API key" in get_exit_code_description(ERROR_NETWORK)

    def test_unknown(self):
        assert get_exit_code_description(-1) == "Unknown error"
