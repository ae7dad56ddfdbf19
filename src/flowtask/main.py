"""Main entry point for the FlowTask CLI."""

import typer

from flowtask import __version__
from flowtask.commands import add_command, config, format_command, parse_command
from flowtask.utils.logger import log_file_path
from flowtask.utils.typer_helpers import SuggestingGroup
from flowtask.utils.ui.formatters import get_console

# Create main app with custom group class
app = typer.Typer(
    name="flowtask",
    cls=SuggestingGroup,
    help="Natural-language reminders: parse dates and recurrences, render schedules",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(config.app, name="config", help="Configuration management")

# Add top-level commands
app.command("parse")(parse_command.parse)
app.command("format")(format_command.format_)
app.command("add")(add_command.add)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]FlowTask[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"[dim]Log file: {log_file_path()}[/dim]", highlight=False)


if __name__ == "__main__":
    app()
