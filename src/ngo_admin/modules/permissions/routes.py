"""Permission matrix API routes.

Reading the matrix needs ``roles:view``; changing it needs ``roles:edit``.
Edits only touch the in-memory overrides until ``POST /permissions/save``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ngo_admin.core.permissions import Module, Permission, PermissionService, Role
from ngo_admin.core.permissions.codec import encode_overrides
from ngo_admin.core.permissions.dependencies import (
    CurrentRoles,
    PermissionServiceDep,
    require_module_permission,
)
from ngo_admin.core.permissions.navigation import MODULE_LABELS, ROLE_LABELS
from ngo_admin.modules.permissions.schemas import (
    CellResponse,
    CheckResponse,
    EffectivePermissionsResponse,
    LoadResponse,
    MatrixResponse,
    MatrixRowResponse,
    OverridesResponse,
    ResetResponse,
    RoleColumn,
    SaveResponse,
    SetOverrideRequest,
    ToggleRequest,
)


router = APIRouter(prefix="/permissions", tags=["permissions"])

CanViewRoles = Annotated[
    list[str], Depends(require_module_permission(Module.ROLES, Permission.VIEW))
]
CanEditRoles = Annotated[
    list[str], Depends(require_module_permission(Module.ROLES, Permission.EDIT))
]


def _overrides_response(service: PermissionService) -> OverridesResponse:
    return OverridesResponse(
        overrides=encode_overrides(service.overrides),
        revision=service.revision,
        dirty=service.has_unsaved_changes,
    )


@router.get("/matrix", response_model=MatrixResponse)
async def get_matrix(service: PermissionServiceDep, _roles: CanViewRoles) -> MatrixResponse:
    """Get the role × permission matrix with override highlighting."""
    return MatrixResponse(
        revision=service.revision,
        dirty=service.has_unsaved_changes,
        loaded=service.loaded,
        roles=[RoleColumn(role=role, label=ROLE_LABELS[role]) for role in Role],
        rows=[
            MatrixRowResponse(
                module=row.module,
                label=MODULE_LABELS[row.module],
                cells=[CellResponse.model_validate(cell) for cell in row.cells],
            )
            for row in service.matrix()
        ],
    )


@router.get("/overrides", response_model=OverridesResponse)
async def get_overrides(
    service: PermissionServiceDep, _roles: CanViewRoles
) -> OverridesResponse:
    """Get the current in-memory overrides."""
    return _overrides_response(service)


@router.post("/toggle", response_model=CellResponse)
async def toggle_cell(
    data: ToggleRequest, service: PermissionServiceDep, _roles: CanEditRoles
) -> CellResponse:
    """Toggle one cell between its default and an override."""
    cell = service.toggle(data.role, data.module, data.permission)
    return CellResponse.model_validate(cell)


@router.put("/overrides/{role}/{module}/{permission}", response_model=CellResponse)
async def set_cell(
    role: Role,
    module: Module,
    permission: Permission,
    data: SetOverrideRequest,
    service: PermissionServiceDep,
    _roles: CanEditRoles,
) -> CellResponse:
    """Set one cell to an explicit value."""
    cell = service.set_override(role, module, permission, data.enabled)
    return CellResponse.model_validate(cell)


@router.post("/reset", response_model=ResetResponse)
async def reset_overrides(
    service: PermissionServiceDep, _roles: CanEditRoles
) -> ResetResponse:
    """Clear all overrides in memory. Call save to make it durable."""
    cleared = service.reset_all()
    return ResetResponse(cleared=cleared, dirty=service.has_unsaved_changes)


@router.post("/save", response_model=SaveResponse)
async def save_overrides(service: PermissionServiceDep, _roles: CanEditRoles) -> SaveResponse:
    """Persist the in-memory overrides.

    Returns 409 if someone else saved since the last load, and 503 if the
    settings store is unavailable. In both cases the unsaved edits are kept.
    """
    result = await service.save()
    return SaveResponse(revision=result.revision, entries=result.entries)


@router.post("/reload", response_model=LoadResponse)
async def reload_overrides(
    service: PermissionServiceDep, _roles: CanEditRoles
) -> LoadResponse:
    """Replace the in-memory overrides with the stored ones.

    Unsaved edits are discarded. A failed load keeps the current overrides
    and reports the error in the body.
    """
    result = await service.load()
    return LoadResponse.model_validate(result)


@router.get("/me", response_model=EffectivePermissionsResponse)
async def get_my_permissions(
    service: PermissionServiceDep, roles: CurrentRoles
) -> EffectivePermissionsResponse:
    """Get every permission the caller's roles grant."""
    return EffectivePermissionsResponse(
        roles=roles,
        modules=service.effective_permissions(roles),
    )


@router.get("/check", response_model=CheckResponse)
async def check_permission(
    service: PermissionServiceDep,
    roles: CurrentRoles,
    module: Annotated[Module, Query()],
    permission: Annotated[Permission, Query()] = Permission.VIEW,
) -> CheckResponse:
    """Check whether the caller may perform an action on a module."""
    return CheckResponse(
        module=module,
        permission=permission,
        allowed=service.can_access(roles, module, permission),
    )
