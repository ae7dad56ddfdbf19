"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from flowtask.utils.ui.formatters import get_console


def suggest_commands(attempted: str, available: list[str]) -> list[str]:
    """Up to three command names that look like *attempted*."""
    return get_close_matches(attempted, available, n=3, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Typer group that answers an unknown command with close matches.

    ``flowtask prase`` -> "Did you mean this? parse". The command name is
    checked before the group resolves it, so this does not depend on which
    usage-error class the installed typer raises. Without a close match the
    group's own usage error is shown.
    """

    def resolve_command(self, ctx, args):
        if args and not ctx.resilient_parsing:
            attempted = args[0]
            if not attempted.startswith("-") and self.get_command(ctx, attempted) is None:
                suggestions = suggest_commands(attempted, sorted(self.commands))
                if suggestions:
                    self._print_suggestions(ctx, attempted, suggestions)
                    raise typer.Exit(1)
        return super().resolve_command(ctx, args)

    def _print_suggestions(self, ctx, attempted: str, suggestions: list[str]) -> None:
        console = get_console()
        console.print(f'[red]Error:[/red] unknown command "{attempted}" for "{ctx.info_name}"')
        console.print()
        if len(suggestions) == 1:
            console.print("[yellow]Did you mean this?[/yellow]")
        else:
            console.print("[yellow]Did you mean one of these?[/yellow]")
        for suggestion in suggestions:
            console.print(f"        {suggestion}")
