"""FastAPI dependencies for permission checks.

The caller's identity is established upstream; this service receives the
user's ID in the ``X-User-Id`` header and looks up their roles. A request
without the header has no roles, so every gate denies it.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Header, Request

from ngo_admin.api.dependencies import DBSession
from ngo_admin.core.constants import USER_ID_HEADER
from ngo_admin.core.errors import ForbiddenError
from ngo_admin.core.permissions.assignments import RoleAssignmentRepository
from ngo_admin.core.permissions.service import PermissionService
from ngo_admin.core.permissions.types import Module, Permission


logger = structlog.get_logger()


def get_permission_service(request: Request) -> PermissionService:
    """Return the application's PermissionService."""
    return request.app.state.permissions


PermissionServiceDep = Annotated[PermissionService, Depends(get_permission_service)]


async def get_current_roles(
    db: DBSession,
    user_id: Annotated[UUID | None, Header(alias=USER_ID_HEADER)] = None,
) -> list[str]:
    """Return the raw role identifiers of the calling user.

    Args:
        db: Database session
        user_id: ID of the authenticated user, if any

    Returns:
        Role identifiers; empty when the caller is anonymous
    """
    if user_id is None:
        return []
    return await RoleAssignmentRepository(db).list_roles(user_id)


CurrentRoles = Annotated[list[str], Depends(get_current_roles)]


def require_module_permission(
    module: Module, permission: Permission = Permission.VIEW
) -> Callable[..., Awaitable[list[str]]]:
    """Dependency factory that requires a permission on a module.

    Usage:
        @router.post("/permissions/save")
        async def save(
            roles: Annotated[list[str], Depends(require_module_permission(Module.ROLES, Permission.EDIT))],
        ):
            ...

    Args:
        module: The module being accessed
        permission: The action being performed

    Returns:
        Dependency that yields the caller's roles, or raises ForbiddenError
    """
    required = f"{module.value}:{permission.value}"

    async def dependency(
        request: Request,
        service: PermissionServiceDep,
        roles: CurrentRoles,
    ) -> list[str]:
        if service.can_access(roles, module, permission):
            return roles

        logger.warning(
            "permission_denied",
            required_permission=required,
            roles=roles,
            path=str(request.url.path),
        )
        raise ForbiddenError(
            f"Missing required permission: {required}",
            error_code="permission_denied",
            details={"required_permission": required},
        )

    return dependency
