"""Permission resolution, role-set gates, and the override lifecycle.

One PermissionService is built per application and handed to whatever
needs to check or edit permissions. Checks are synchronous and never
raise: an override wins over the compiled default, super_admin is always
allowed, and anything unrecognised is denied. Only ``load`` and ``save``
touch storage.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from ngo_admin.core.errors import OverrideLoadError, ValidationError
from ngo_admin.core.permissions.codec import RejectedEntry
from ngo_admin.core.permissions.defaults import default_for
from ngo_admin.core.permissions.overrides import OverrideStore
from ngo_admin.core.permissions.persistence import OverridePersistence
from ngo_admin.core.permissions.types import (
    Module,
    Permission,
    PermissionKey,
    Role,
    coerce,
    parse_roles,
)
from ngo_admin.core.settings import MemorySettingsBackend, build_settings_backend


if TYPE_CHECKING:
    from ngo_admin.config import Settings


logger = structlog.get_logger()


@dataclass(frozen=True)
class CellState:
    """State of one (role, module, permission) cell of the admin matrix."""

    role: Role
    module: Module
    permission: Permission
    enabled: bool
    default: bool
    overridden: bool


@dataclass(frozen=True)
class MatrixRow:
    """All cells of one module."""

    module: Module
    cells: list[CellState]


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load. A failed load leaves the overrides untouched."""

    ok: bool
    revision: int
    entries: int
    rejected: list[RejectedEntry] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a successful save."""

    revision: int
    entries: int


class PermissionService:
    """Resolver, capability gate, and override lifecycle in one object.

    Args:
        persistence: Where overrides are loaded from and saved to.
            Defaults to a process-local store.
        store: Override store to use; a fresh empty one by default
    """

    def __init__(
        self,
        persistence: OverridePersistence | None = None,
        store: OverrideStore | None = None,
    ) -> None:
        self.persistence = persistence or OverridePersistence(MemorySettingsBackend())
        self._store = store or OverrideStore()
        self._persisted: dict[PermissionKey, bool] = self._store.snapshot()
        self._revision = 0
        self._loaded = False
        self._io_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def overrides(self) -> dict[PermissionKey, bool]:
        """Copy of the current in-memory overrides."""
        return self._store.snapshot()

    @property
    def revision(self) -> int:
        """Storage revision last loaded or saved."""
        return self._revision

    @property
    def loaded(self) -> bool:
        """Whether a load has succeeded at least once."""
        return self._loaded

    @property
    def has_unsaved_changes(self) -> bool:
        """Whether in-memory overrides differ from what was last persisted."""
        return self._store.snapshot() != self._persisted

    # ------------------------------------------------------------------
    # Resolver
    # ------------------------------------------------------------------

    def resolve(self, role: object, module: object, permission: object) -> bool:
        """Return whether a single role currently has a permission on a module."""
        key = PermissionKey.from_values(role, module, permission)
        if key is None:
            return False
        return self._resolve_key(key)

    def _resolve_key(self, key: PermissionKey) -> bool:
        if key.role is Role.SUPER_ADMIN:
            return True
        override = self._store.get(key)
        if override is not None:
            return override
        return default_for(key)

    def is_overridden(self, role: object, module: object, permission: object) -> bool:
        """Return whether the cell currently has an override."""
        key = PermissionKey.from_values(role, module, permission)
        return key is not None and key in self._store

    def cell(self, role: object, module: object, permission: object) -> CellState:
        """Return the full display state of one cell.

        Raises:
            ValidationError: If any value is not a known member
        """
        return self._cell(self._require_key(role, module, permission))

    def _cell(self, key: PermissionKey) -> CellState:
        return CellState(
            role=key.role,
            module=key.module,
            permission=key.permission,
            enabled=self._resolve_key(key),
            default=default_for(key),
            overridden=key in self._store,
        )

    def matrix(self, roles: Iterable[object] | None = None) -> list[MatrixRow]:
        """Build the admin matrix: one row per module, cells per role and permission.

        Args:
            roles: Columns to include; every role when omitted
        """
        columns = parse_roles(roles) if roles is not None else list(Role)
        return [
            MatrixRow(
                module=module,
                cells=[
                    self._cell(PermissionKey(role, module, permission))
                    for role in columns
                    for permission in Permission
                ],
            )
            for module in Module
        ]

    # ------------------------------------------------------------------
    # Capability gate
    # ------------------------------------------------------------------

    def can_access(self, roles: Iterable[object], module: object, permission: object) -> bool:
        """Return True if any of the roles grants the permission on the module.

        An empty or entirely unrecognised role set is always denied.
        """
        parsed_module = coerce(Module, module)
        parsed_permission = coerce(Permission, permission)
        if parsed_module is None or parsed_permission is None:
            return False
        return any(
            self._resolve_key(PermissionKey(role, parsed_module, parsed_permission))
            for role in parse_roles(roles)
        )

    def can_view_module(self, roles: Iterable[object], module: object) -> bool:
        """Return True if the roles may see the module at all."""
        return self.can_access(roles, module, Permission.VIEW)

    def can_create(self, roles: Iterable[object], module: object) -> bool:
        return self.can_access(roles, module, Permission.CREATE)

    def can_edit(self, roles: Iterable[object], module: object) -> bool:
        return self.can_access(roles, module, Permission.EDIT)

    def can_delete(self, roles: Iterable[object], module: object) -> bool:
        return self.can_access(roles, module, Permission.DELETE)

    def accessible_modules(self, roles: Iterable[object]) -> list[Module]:
        """Return the modules the roles can view, in menu order."""
        parsed = parse_roles(roles)
        return [module for module in Module if self.can_view_module(parsed, module)]

    def effective_permissions(self, roles: Iterable[object]) -> dict[Module, list[Permission]]:
        """Return every granted permission per module for a role set.

        Modules with no granted permission are left out.
        """
        parsed = parse_roles(roles)
        effective: dict[Module, list[Permission]] = {}
        for module in Module:
            granted = [p for p in Permission if self.can_access(parsed, module, p)]
            if granted:
                effective[module] = granted
        return effective

    # ------------------------------------------------------------------
    # Administrative edits (in memory only until save)
    # ------------------------------------------------------------------

    def toggle(self, role: object, module: object, permission: object) -> CellState:
        """Flip one cell between its default and an override.

        Raises:
            ValidationError: If any value is not a known member
            ProtectedRoleError: If the role is super_admin
        """
        key = self._require_key(role, module, permission)
        enabled = self._store.toggle(key)
        logger.info(
            "override_toggled",
            key=key.encode(),
            enabled=enabled,
            overridden=key in self._store,
        )
        return self._cell(key)

    def set_override(
        self, role: object, module: object, permission: object, enabled: bool
    ) -> CellState:
        """Set one cell to an explicit value.

        Setting a cell to its default value clears its override.

        Raises:
            ValidationError: If any value is not a known member
            ProtectedRoleError: If the role is super_admin
        """
        key = self._require_key(role, module, permission)
        self._store.set(key, enabled)
        logger.info("override_set", key=key.encode(), enabled=enabled)
        return self._cell(key)

    def replace_overrides(self, entries: dict[PermissionKey, bool]) -> None:
        """Swap all in-memory overrides at once.

        Raises:
            ProtectedRoleError: If any entry targets super_admin
        """
        self._store.replace(entries)
        logger.info("overrides_replaced", entries=len(self._store))

    def reset_all(self) -> int:
        """Drop every in-memory override and return how many there were.

        The reset is only durable after ``save``.
        """
        cleared = len(self._store)
        self._store.clear()
        logger.info("overrides_reset", cleared=cleared)
        return cleared

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> LoadResult:
        """Replace the in-memory overrides with the stored ones.

        Never raises for storage problems: on failure the current overrides
        are kept and the returned result carries the error.
        """
        async with self._io_lock:
            try:
                loaded = await self.persistence.load()
            except OverrideLoadError as exc:
                logger.warning(
                    "overrides_load_failed",
                    error=exc.message,
                    kept_entries=len(self._store),
                )
                return LoadResult(
                    ok=False,
                    revision=self._revision,
                    entries=len(self._store),
                    error=exc.message,
                )

            self._store.replace(loaded.entries)
            self._persisted = self._store.snapshot()
            self._revision = loaded.revision
            self._loaded = True

        logger.info(
            "overrides_loaded",
            entries=len(self._store),
            revision=self._revision,
            rejected=len(loaded.rejected),
        )
        return LoadResult(
            ok=True,
            revision=self._revision,
            entries=len(self._store),
            rejected=loaded.rejected,
        )

    async def save(self) -> SaveResult:
        """Write the in-memory overrides to storage as a full replace.

        On failure the in-memory overrides are kept so the save can be
        retried.

        Raises:
            StaleRevisionError: If storage changed since the last load or save
            OverrideSaveError: If the backend fails
        """
        async with self._io_lock:
            snapshot = self._store.snapshot()
            try:
                revision = await self.persistence.save(snapshot, self._revision)
            except Exception as exc:
                logger.warning(
                    "overrides_save_failed",
                    error=str(exc),
                    entries=len(snapshot),
                    revision=self._revision,
                )
                raise

            self._persisted = snapshot
            self._revision = revision

        logger.info("overrides_saved", entries=len(snapshot), revision=revision)
        return SaveResult(revision=revision, entries=len(snapshot))

    # ------------------------------------------------------------------

    @staticmethod
    def _require_key(role: object, module: object, permission: object) -> PermissionKey:
        key = PermissionKey.from_values(role, module, permission)
        if key is None:
            errors = [
                {"field": name, "message": f"Unknown {name} {value!r}"}
                for name, enum_cls, value in (
                    ("role", Role, role),
                    ("module", Module, module),
                    ("permission", Permission, permission),
                )
                if coerce(enum_cls, value) is None
            ]
            raise ValidationError("Unknown permission cell", errors=errors)
        return key


def build_permission_service(settings: "Settings") -> PermissionService:
    """Create a PermissionService backed by the configured settings backend."""
    persistence = OverridePersistence(
        build_settings_backend(settings),
        key=settings.permission_overrides_key,
    )
    return PermissionService(persistence)
