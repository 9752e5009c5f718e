"""Role-based permission engine.

Compiled defaults, admin overrides merged on top, OR-aggregation across a
user's roles, and load/save of the overrides through a settings backend.
"""

from ngo_admin.core.permissions.defaults import DEFAULT_GRANTS, get_default_permission
from ngo_admin.core.permissions.overrides import OverrideStore
from ngo_admin.core.permissions.persistence import LoadedOverrides, OverridePersistence
from ngo_admin.core.permissions.service import (
    CellState,
    LoadResult,
    MatrixRow,
    PermissionService,
    SaveResult,
    build_permission_service,
)
from ngo_admin.core.permissions.types import Module, Permission, PermissionKey, Role


__all__ = [
    "DEFAULT_GRANTS",
    "CellState",
    "LoadResult",
    "LoadedOverrides",
    "MatrixRow",
    "Module",
    "OverridePersistence",
    "OverrideStore",
    "Permission",
    "PermissionKey",
    "PermissionService",
    "Role",
    "SaveResult",
    "build_permission_service",
    "get_default_permission",
]
