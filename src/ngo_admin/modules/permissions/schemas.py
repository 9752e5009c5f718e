"""Pydantic schemas for the permission matrix API."""

from pydantic import BaseModel, ConfigDict, Field

from ngo_admin.core.permissions import Module, Permission, Role


class CellResponse(BaseModel):
    """One cell of the matrix."""

    model_config = ConfigDict(from_attributes=True)

    role: Role
    module: Module
    permission: Permission
    enabled: bool
    default: bool
    overridden: bool


class RoleColumn(BaseModel):
    """A role shown as a column group of the matrix."""

    role: Role
    label: str


class MatrixRowResponse(BaseModel):
    """All cells of one module."""

    module: Module
    label: str
    cells: list[CellResponse]


class MatrixResponse(BaseModel):
    """The full role × permission matrix, one row per module."""

    revision: int
    dirty: bool = Field(description="True when there are unsaved changes")
    loaded: bool = Field(description="False while only compiled defaults are in effect")
    roles: list[RoleColumn]
    rows: list[MatrixRowResponse]


class OverridesResponse(BaseModel):
    """Current in-memory overrides in their storage form."""

    overrides: dict[str, bool]
    revision: int
    dirty: bool


class ToggleRequest(BaseModel):
    """Identifies the cell to toggle."""

    role: Role
    module: Module
    permission: Permission


class SetOverrideRequest(BaseModel):
    """Explicit value for a cell."""

    enabled: bool


class ResetResponse(BaseModel):
    """Result of clearing all in-memory overrides."""

    cleared: int
    dirty: bool


class SaveResponse(BaseModel):
    """Result of a successful save."""

    revision: int
    entries: int


class RejectedEntryResponse(BaseModel):
    """A stored entry skipped during load."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    reason: str


class LoadResponse(BaseModel):
    """Result of reloading overrides from storage."""

    model_config = ConfigDict(from_attributes=True)

    ok: bool
    revision: int
    entries: int
    rejected: list[RejectedEntryResponse] = []
    error: str | None = None


class EffectivePermissionsResponse(BaseModel):
    """What the caller's role set grants."""

    roles: list[str]
    modules: dict[Module, list[Permission]]


class CheckResponse(BaseModel):
    """Answer to a single capability check."""

    module: Module
    permission: Permission
    allowed: bool
