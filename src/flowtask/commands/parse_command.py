"""Command 'parse' of flowtask"""

import typer

from flowtask.services.config_service import get_config_service
from flowtask.utils.recurrence_parser import extract, rules_for
from flowtask.utils.ui.formatters import format_extraction_pretty, format_output

from .decorators import command_wrapper
from .utils import resolve_now, resolve_output


@command_wrapper
def parse(
    text: str = typer.Argument(..., help="Task title as typed"),
    now: str | None = typer.Option(
        None, "--now", help="Reference time (ISO 8601), defaults to the current time"
    ),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output format (pretty/json/yaml)"
    ),
    json_opt: bool = typer.Option(
        False, "--json", help="Output as JSON (alias for --output json)"
    ),
) -> None:
    """
    Extract a recurrence or date from a task title.

    Examples:
      flowtask parse "every tuesday at 6pm call mom"
      flowtask parse "dentist tomorrow at three" --now 2026-10-16T09:00
      flowtask parse "pay rent on the 3rd of every month" --json
    """
    config_svc = get_config_service()
    output = resolve_output(config_svc, output, json_opt)
    reference = resolve_now(config_svc, now)
    recurrence_config = config_svc.config.recurrence

    result = extract(
        text,
        reference,
        rules=rules_for(recurrence_config.collapse_weekday_patterns),
        default_time=recurrence_config.default_time,
    )

    if output == "pretty":
        format_extraction_pretty(result)
    else:
        format_output(result.model_dump(mode="json", by_alias=True), output)
