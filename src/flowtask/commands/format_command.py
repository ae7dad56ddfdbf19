"""Command 'format' of flowtask"""

import json

import typer
from pydantic import ValidationError

from flowtask.models.recurrence import RecurrenceDescriptor
from flowtask.utils.exit_codes import ERROR_INVALID_ARGS
from flowtask.utils.logger import get_logger
from flowtask.utils.recurrence import format_recurrence
from flowtask.utils.ui.formatters import get_console

from .decorators import AppError, command_wrapper

console = get_console()


@command_wrapper
def format_(
    record: str | None = typer.Option(
        None, "--json", help="Stored recurrence record as a JSON object"
    ),
    frequency: str | None = typer.Option(
        None, "--frequency", "-f", help="minutely/hourly/daily/weekly/monthly/yearly/..."
    ),
    time: str | None = typer.Option(None, "--time", "-t", help="Anchor time, HH:MM"),
    interval: int | None = typer.Option(None, "--interval", help="Every N minutes/hours"),
    day_of_week: int | None = typer.Option(
        None, "--day-of-week", help="0-6, Sunday is 0"
    ),
    day_of_month: int | None = typer.Option(None, "--day-of-month", help="1-31"),
    month: int | None = typer.Option(None, "--month", help="1-12"),
    original_text: str | None = typer.Option(
        None, "--original-text", help="Phrase the schedule was parsed from"
    ),
) -> None:
    """
    Render a stored recurrence as display text.

    Examples:
      flowtask format --frequency hourly --interval 3 --time 14:00
      flowtask format --json '{"frequency": "weekly", "dayOfWeek": 2, "originalText": "every other tuesday"}'
    """
    if record is not None:
        try:
            data = json.loads(record)
        except json.JSONDecodeError as e:
            raise AppError(f"--json is not valid JSON: {e}", ERROR_INVALID_ARGS) from e
        if not isinstance(data, dict):
            raise AppError("--json must be a JSON object", ERROR_INVALID_ARGS)
    elif frequency:
        options = {
            "frequency": frequency,
            "time": time,
            "interval": interval,
            "dayOfWeek": day_of_week,
            "dayOfMonth": day_of_month,
            "monthOfYear": month,
            "originalText": original_text,
        }
        data = {key: value for key, value in options.items() if value is not None}
    else:
        raise AppError("Either --json or --frequency is required", ERROR_INVALID_ARGS)

    console.print(format_recurrence(_load_record(data)), highlight=False)


def _load_record(data: dict) -> RecurrenceDescriptor | dict:
    """Validate a stored record, keeping the raw mapping when it is malformed.

    The renderer copes with bad fields on its own; the log notes them.
    """
    try:
        descriptor = RecurrenceDescriptor.from_record(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in e.errors())
        get_logger().warning("recurrence record has invalid fields (%s); rendering leniently", fields)
        return data
    if descriptor.known_frequency is None:
        get_logger().warning("unknown recurrence frequency %r", descriptor.frequency)
    return descriptor
