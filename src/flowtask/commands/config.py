"""`flowtask config`: inspect and edit config.json."""

import typer

from flowtask.services.config_service import get_config_service
from flowtask.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from flowtask.utils.ui.formatters import (
    format_output,
    format_single_item,
    format_success,
    get_console,
)

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Inspect and edit FlowTask settings")
console = get_console()


def _coerce(value: str) -> str | int | float | bool:
    """Best-effort conversion of a CLI string to a config value."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("pretty", "--output", "-o", help="pretty, json or yaml"),
) -> None:
    """Show every setting, grouped by section."""
    config_dict = get_config_service().config.model_dump()
    if output == "pretty":
        for section, values in config_dict.items():
            console.print(f"[bold cyan]{section}[/bold cyan]")
            format_single_item(values)
    else:
        format_output(config_dict, output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ai.model)"),
) -> None:
    """Print one setting."""
    value = get_config_service().get(key)
    if value is None:
        raise AppError(f"Configuration key '{key}' not found", ERROR_NOT_FOUND)
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ai.model)"),
    value: str = typer.Argument(..., help="New value (true/false and numbers are converted)"),
) -> None:
    """Change one setting; the value is validated before saving."""
    parsed_value = _coerce(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_NOT_FOUND) from e
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    format_success(f"{key} = {parsed_value!r}")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Restore one setting, or all of them, to the defaults."""
    if not yes:
        target = f"'{key}'" if key else "all configuration"
        if not typer.confirm(f"Reset {target} to defaults?"):
            raise typer.Exit(0)
    try:
        get_config_service().reset(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_NOT_FOUND) from e
    format_success(f"{key or 'configuration'} reset to defaults")
