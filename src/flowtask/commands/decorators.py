"""Decorators for command functions."""

import asyncio
import functools
import time
import traceback
from collections.abc import Callable

import typer

from flowtask.services.ai_service import AIServiceError
from flowtask.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_NETWORK,
    get_exit_code_description,
    get_exit_code_name,
)
from flowtask.utils.logger import get_logger
from flowtask.utils.ui.formatters import format_error


class AppError(Exception):
    """User-facing command failure carrying the exit code to return."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def _abort(cmd: str, started: float, shown: str, exit_code: int, detail: str = "") -> typer.Exit:
    elapsed = time.monotonic() - started
    get_logger().error(
        "command failed: %s (%.3fs) - %s [%s]%s",
        cmd,
        elapsed,
        shown,
        get_exit_code_name(exit_code),
        detail,
    )
    format_error(shown)
    return typer.Exit(code=exit_code)


def command_wrapper(func: Callable):
    """Run a command with timing logs and exit-code mapping.

    Coroutine functions are driven with ``asyncio.run``. ``AppError`` exits
    with its own code, ``AIServiceError`` with ERROR_NETWORK and anything
    else with ERROR_GENERAL after logging the traceback.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        cmd = func.__name__
        started = time.monotonic()
        get_logger().info("command started: %s", cmd)
        try:
            if asyncio.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)
        except typer.Exit:
            # --help, declined confirmations and other deliberate exits
            raise
        except AppError as e:
            raise _abort(cmd, started, str(e), e.exit_code) from e
        except AIServiceError as e:
            shown = f"{e}. {get_exit_code_description(ERROR_NETWORK)}"
            raise _abort(cmd, started, shown, ERROR_NETWORK) from e
        except Exception as e:
            raise _abort(
                cmd,
                started,
                f"An unexpected error occurred: {e}",
                ERROR_GENERAL,
                "\n" + traceback.format_exc(),
            ) from e

        get_logger().info("command completed: %s (%.3fs)", cmd, time.monotonic() - started)
        return result

    return wrapper
