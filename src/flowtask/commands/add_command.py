"""Command 'add' of flowtask"""

import typer

from flowtask.models.item import ListRef
from flowtask.services.ai_service import AIService
from flowtask.services.config_service import get_config_service
from flowtask.services.quick_add_service import QuickAddService
from flowtask.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NETWORK
from flowtask.utils.ui.formatters import (
    format_info,
    format_item_pretty,
    format_output,
    format_warning,
)

from .decorators import AppError, command_wrapper
from .utils import resolve_now, resolve_output


def parse_list_options(values: list[str]) -> list[ListRef]:
    """Turn ``NAME=ID`` options into list references."""
    lists = []
    for value in values:
        name, sep, list_id = value.partition("=")
        if not sep or not name.strip() or not list_id.strip():
            raise AppError(f"--list expects NAME=ID, got {value!r}", ERROR_INVALID_ARGS)
        lists.append(ListRef(id=list_id.strip(), name=name.strip()))
    return lists


@command_wrapper
async def add(
    text: str = typer.Argument(..., help="Natural language task description"),
    list_opts: list[str] = typer.Option(
        [], "--list", "-l", help="Candidate list as NAME=ID (repeatable)"
    ),
    now: str | None = typer.Option(
        None, "--now", help="Reference time (ISO 8601), defaults to the current time"
    ),
    no_ai: bool = typer.Option(
        False, "--no-ai", help="Skip spell correction and list matching"
    ),
    strict_ai: bool = typer.Option(
        False, "--strict-ai", help="Fail instead of falling back when the AI call errors"
    ),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output format (pretty/json/yaml)"
    ),
    json_opt: bool = typer.Option(
        False, "--json", help="Output as JSON (alias for --output json)"
    ),
) -> None:
    """
    Quick add a task using natural language.

    Prints the item that would be stored; nothing is saved.

    Examples:
      flowtask add "every tuesday at 6pm call mom" --list Family=fam-1
      flowtask add "dentist tomorrow at 5pm" --no-ai
    """
    text = text.strip()
    if not text:
        raise AppError("Task text is required", ERROR_INVALID_ARGS)

    config_svc = get_config_service()
    output = resolve_output(config_svc, output, json_opt)
    reference = resolve_now(config_svc, now)
    lists = parse_list_options(list_opts)

    ai = None
    if not no_ai:
        ai = AIService(config_svc.config.ai)
        if not ai.api_key:
            key_env = config_svc.config.ai.api_key_env
            if strict_ai:
                raise AppError(f"{key_env} is not set", ERROR_NETWORK)
            if output == "pretty":
                format_warning(f"{key_env} is not set; using the title as typed")
            ai = None
    service = QuickAddService(
        processor=ai,
        recurrence_config=config_svc.config.recurrence,
        strict=strict_ai,
    )
    try:
        draft, _ = await service.quick_add(text, lists, reference)
    finally:
        if ai is not None:
            await ai.close()

    if output == "pretty":
        format_item_pretty(draft)
        if draft.list_id is None:
            format_info("No lists given; the item goes to a new 'Personal' list")
    else:
        format_output(draft.model_dump(mode="json", by_alias=True), output)
