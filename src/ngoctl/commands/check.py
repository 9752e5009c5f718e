"""Command: ngoctl check - Check what a set of roles may do."""

import typer
from rich.console import Console

from ngo_admin.core.permissions import Module, Permission, PermissionService


console = Console()


def check(
    roles: list[str] = typer.Argument(..., help="Role identifiers held by the user"),
    module: Module = typer.Option(..., "--module", "-m", help="Module to check"),
    permission: Permission = typer.Option(
        Permission.VIEW, "--permission", "-p", help="Action to check"
    ),
) -> None:
    """Check whether any of the given roles allows an action on a module.

    Exits with code 0 when allowed and 1 when denied.
    """
    from ngoctl.utils import load_or_exit, run_with_service

    async def action(service: PermissionService) -> bool:
        await load_or_exit(service)
        return service.can_access(roles, module, permission)

    allowed = run_with_service(action)
    target = f"{module.value}:{permission.value}"
    if allowed:
        console.print(f"[green]✓[/green] {', '.join(roles)} → {target} [green]allowed[/green]")
        return

    console.print(f"[red]✗[/red] {', '.join(roles)} → {target} [red]denied[/red]")
    raise typer.Exit(1)
