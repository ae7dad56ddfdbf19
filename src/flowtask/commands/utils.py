"""Helpers shared by command modules."""

from datetime import datetime

from flowtask.commands.decorators import AppError
from flowtask.services.config_service import ConfigService
from flowtask.utils.exit_codes import ERROR_INVALID_ARGS


def resolve_now(config_svc: ConfigService, now: str | None) -> datetime:
    """Parse a ``--now`` ISO timestamp, defaulting to the current time.

    Naive timestamps are placed in the configured reference timezone.
    """
    if not now:
        return config_svc.now()
    try:
        parsed = datetime.fromisoformat(now)
    except ValueError as e:
        raise AppError(f"Invalid --now timestamp: {now!r}", ERROR_INVALID_ARGS) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=config_svc.reference_timezone())
    return parsed


def resolve_output(config_svc: ConfigService, output: str | None, json_opt: bool) -> str:
    """Pick the output format from flags, falling back to the config default."""
    if json_opt:
        return "json"
    output = output or config_svc.config.output.format
    if output not in ("pretty", "json", "yaml"):
        raise AppError(f"Unknown output format: {output}", ERROR_INVALID_ARGS)
    return output
