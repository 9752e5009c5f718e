"""Command: ngoctl matrix - Show the effective permission matrix."""

import typer
from rich.console import Console
from rich.table import Table

from ngo_admin.core.permissions import MatrixRow, PermissionService, Role
from ngo_admin.core.permissions.service import CellState


console = Console()


def _format_cells(cells: list[CellState]) -> str:
    """Render one role's four cells as e.g. ``V C E -``.

    Overridden cells are highlighted in yellow.
    """
    parts: list[str] = []
    for cell in cells:
        letter = cell.permission.value[0].upper() if cell.enabled else "-"
        if cell.overridden:
            parts.append(f"[bold yellow]{letter}[/bold yellow]")
        elif cell.enabled:
            parts.append(f"[green]{letter}[/green]")
        else:
            parts.append(f"[dim]{letter}[/dim]")
    return " ".join(parts)


def _build_table(rows: list[MatrixRow], roles: list[Role]) -> Table:
    table = Table(title="Permission matrix", caption="[bold yellow]yellow[/bold yellow] = overridden")
    table.add_column("Module", style="cyan", no_wrap=True)
    for role in roles:
        table.add_column(role.value, no_wrap=True)

    per_role = len(rows[0].cells) // len(roles) if rows and roles else 0
    for row in rows:
        table.add_row(
            row.module.value,
            *[
                _format_cells(row.cells[index * per_role : (index + 1) * per_role])
                for index in range(len(roles))
            ],
        )
    return table


def matrix(
    role: list[Role] | None = typer.Option(
        None, "--role", "-r", help="Only show these roles (repeatable)"
    ),
) -> None:
    """Show the effective permission matrix (defaults plus stored overrides)."""
    from ngoctl.utils import load_or_exit, run_with_service

    roles = list(dict.fromkeys(role)) if role else list(Role)

    async def action(service: PermissionService) -> list[MatrixRow]:
        await load_or_exit(service)
        return service.matrix(roles)

    rows = run_with_service(action)
    console.print(_build_table(rows, roles))
