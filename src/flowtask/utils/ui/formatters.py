"""Terminal output: rich console, structured dumps and item previews."""

import json
from functools import lru_cache
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

from flowtask.models.item import ItemDraft
from flowtask.models.recurrence import ExtractionResult
from flowtask.utils.recurrence import (
    describe_pattern,
    format_recurrence,
    format_reminder_date,
)


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Shared Rich console; one per highlight setting."""
    return Console(highlight=highlight)


console = get_console()

PRIORITY_ICONS = {
    "now": "🔴",
    "high": "🟠",
    "low": "🟢",
}

KIND_ICONS = {
    "recurrence": "🔄",
    "absoluteDate": "📅",
    "none": "📝",
}


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Print *data* as JSON, YAML or, for dicts, a key/value table.

    JSON and YAML go through plain ``print`` so scripts get them unstyled.
    """
    match output_format:
        case "json":
            print(json.dumps(data, indent=2, default=str))
        case "yaml":
            print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
        case _ if isinstance(data, dict):
            format_single_item(data)
        case _:
            console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, dict | list):
        return json.dumps(value, default=str)
    if value is None or value == "":
        return "-"
    return str(value)


def format_single_item(item: dict) -> None:
    """Two-column table, snake_case keys shown as Title Case."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))
    console.print(table)


def _status_line(label: str, style: str, message: str) -> None:
    console.print(f"[{style}]{label}:[/{style}] {message}")


def format_error(message: str) -> None:
    _status_line("Error", "bold red", message)


def format_success(message: str) -> None:
    _status_line("Success", "bold green", message)


def format_warning(message: str) -> None:
    _status_line("Warning", "bold yellow", message)


def format_info(message: str) -> None:
    _status_line("Info", "bold blue", message)


def format_extraction_pretty(result: ExtractionResult) -> None:
    """Show an extraction result the way the add form previews it."""
    icon = KIND_ICONS.get(result.kind.value, "📝")
    title = result.residual_text or "[dim](empty title)[/dim]"
    console.print(f"{icon} [bold]{title}[/bold]")

    if result.recurrence is not None:
        console.print(
            f"   [cyan]Recurring pattern detected:[/cyan] {format_recurrence(result.recurrence)}"
        )
    elif result.absolute_date is not None:
        console.print(
            f"   [cyan]Date detected:[/cyan] {format_reminder_date(result.absolute_date)}"
        )
    else:
        console.print("   [dim]No date or recurrence found[/dim]")

    if result.recurrence is not None and result.matched_span:
        phrase = describe_pattern(result.matched_span, result.recurrence.time)
        console.print(f"   [dim]Matched: {result.matched_span!r} ({phrase})[/dim]")
    elif result.matched_span:
        console.print(f"   [dim]Matched: {result.matched_span!r}[/dim]")
    if result.time_span:
        console.print(f"   [dim]Time: {result.time_span!r}[/dim]")


def format_item_pretty(item: ItemDraft) -> None:
    """Show a draft item ready for the store."""
    icon = PRIORITY_ICONS.get(item.priority, "🟢")
    console.print(f"{icon} [bold]{item.title}[/bold]")
    console.print(f"   [dim]{item.type} · {item.status} · list {item.list_id or '-'}[/dim]")
    if item.recurrence is not None:
        console.print(f"   🔄 {format_recurrence(item.recurrence)}")
    elif item.reminder_date is not None:
        console.print(f"   🔔 {format_reminder_date(item.reminder_date)}")
