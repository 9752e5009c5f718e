"""Main ngoctl CLI application."""

import typer
from rich.console import Console

from ngoctl import __version__
from ngoctl.commands import check, matrix, overrides


console = Console()

app = typer.Typer(
    name="ngoctl",
    help="Inspect and manage role permissions of the charity admin panel.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="matrix")(matrix.matrix)
app.command(name="check")(check.check)
app.add_typer(overrides.app, name="overrides")


@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logs on stderr."
    ),
) -> None:
    """ngoctl - permission engine operator tool."""
    from ngoctl.utils import setup_logging

    if version:
        console.print(f"[bold cyan]ngoctl[/bold cyan] version {__version__}")
        raise typer.Exit()

    setup_logging(verbose)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
