"""Command group: ngoctl overrides - Inspect and edit stored overrides.

Every editing command loads the stored overrides, applies one change,
and saves, so it behaves like one admin making one edit in the matrix.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ngo_admin.core.errors import OverridePayloadError
from ngo_admin.core.permissions import Module, Permission, PermissionService, Role
from ngo_admin.core.permissions.codec import decode_overrides, dumps_overrides
from ngo_admin.core.permissions.defaults import default_for


console = Console()

app = typer.Typer(help="Inspect and edit permission overrides.", no_args_is_help=True)


@app.command("show")
def show() -> None:
    """List the stored overrides."""
    from ngoctl.utils import load_or_exit, run_with_service

    async def action(service: PermissionService) -> PermissionService:
        await load_or_exit(service)
        return service

    service = run_with_service(action)
    overrides = service.overrides
    if not overrides:
        console.print("[dim]No overrides stored; compiled defaults apply.[/dim]")
        return

    table = Table(title=f"Permission overrides (revision {service.revision})")
    table.add_column("Role", style="cyan")
    table.add_column("Module")
    table.add_column("Permission")
    table.add_column("Default")
    table.add_column("Override", style="bold yellow")

    for key, value in sorted(overrides.items()):
        table.add_row(
            key.role.value,
            key.module.value,
            key.permission.value,
            "allow" if default_for(key) else "deny",
            "allow" if value else "deny",
        )
    console.print(table)


@app.command("toggle")
def toggle(
    role: Role = typer.Argument(..., help="Role of the cell"),
    module: Module = typer.Argument(..., help="Module of the cell"),
    permission: Permission = typer.Argument(..., help="Permission of the cell"),
) -> None:
    """Toggle one cell between its default and an override, then save."""
    from ngoctl.utils import load_or_exit, run_with_service

    async def action(service: PermissionService) -> bool:
        await load_or_exit(service)
        cell = service.toggle(role, module, permission)
        await service.save()
        return cell.enabled

    enabled = run_with_service(action)
    state = "[green]allowed[/green]" if enabled else "[red]denied[/red]"
    console.print(f"[green]✓[/green] {role.value}:{module.value}:{permission.value} is now {state}")


@app.command("reset")
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Remove every override and save, restoring the compiled defaults."""
    from ngoctl.utils import load_or_exit, run_with_service

    if not yes:
        confirm = typer.confirm("Remove all permission overrides for every role?")
        if not confirm:
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Exit(0)

    async def action(service: PermissionService) -> int:
        await load_or_exit(service)
        cleared = service.reset_all()
        await service.save()
        return cleared

    cleared = run_with_service(action)
    console.print(f"[green]✓[/green] Removed {cleared} override(s)")


@app.command("export")
def export(
    output: Path = typer.Argument(..., help="File to write the overrides JSON to"),
) -> None:
    """Write the stored overrides to a JSON file."""
    from ngoctl.utils import load_or_exit, run_with_service

    async def action(service: PermissionService) -> str:
        await load_or_exit(service)
        return dumps_overrides(service.overrides)

    payload = run_with_service(action)
    output.write_text(payload + "\n", encoding="utf-8")
    console.print(f"[green]✓[/green] Exported overrides to {output}")


@app.command("import")
def import_(
    source: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON file previously written by export"
    ),
) -> None:
    """Replace the stored overrides with the contents of a JSON file."""
    from ngoctl.utils import load_or_exit, run_with_service

    try:
        decoded = decode_overrides(source.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except OverridePayloadError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    for rejected in decoded.rejected:
        console.print(f"[yellow]Skipped[/yellow] {rejected.key}: {rejected.reason}")

    async def action(service: PermissionService) -> int:
        await load_or_exit(service)
        service.replace_overrides(decoded.entries)
        result = await service.save()
        return result.entries

    entries = run_with_service(action)
    console.print(f"[green]✓[/green] Imported {entries} override(s) from {source}")
