"""Helpers shared by ngoctl commands."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console

from ngo_admin.config import settings
from ngo_admin.core.cache import close_redis_pool
from ngo_admin.core.errors import AppException
from ngo_admin.core.logging import configure_logging
from ngo_admin.core.permissions import LoadResult, PermissionService, build_permission_service


T = TypeVar("T")

console = Console()


def setup_logging(verbose: bool) -> None:
    """Send structured logs to stderr so they don't mix with command output."""
    configure_logging(settings, level="DEBUG" if verbose else "WARNING", stream=sys.stderr)


async def close_backends() -> None:
    """Release connection pools opened by the settings backend."""
    if settings.settings_backend == "database":
        from ngo_admin.core.database import async_engine  # noqa: PLC0415

        await async_engine.dispose()
    elif settings.settings_backend == "redis":
        await close_redis_pool()


def run_with_service(action: Callable[[PermissionService], Awaitable[T]]) -> T:
    """Run an async action against a freshly built PermissionService.

    Everything happens inside one event loop so pooled connections are
    never shared across loops. Application errors are printed and turned
    into exit code 1.
    """

    async def main() -> T:
        service = build_permission_service(settings)
        try:
            return await action(service)
        finally:
            await close_backends()

    try:
        return asyncio.run(main())
    except AppException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


async def load_or_exit(service: PermissionService) -> LoadResult:
    """Load overrides, aborting the command if they can't be read.

    Commands that save must start from the stored state; saving on top of
    defaults after a failed load would wipe every stored override.
    """
    result = await service.load()
    if not result.ok:
        console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)

    for rejected in result.rejected:
        console.print(f"[yellow]Skipped stored entry[/yellow] {rejected.key}: {rejected.reason}")
    return result
