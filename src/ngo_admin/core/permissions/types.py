"""Roles, modules, permissions, and the structured override key.

All three are closed enumerations. Strings coming from outside (HTTP
headers, the role-assignment table, stored override blobs) are converted
at the boundary; anything that is not a known member never becomes a key.
"""

from enum import StrEnum
from typing import NamedTuple, TypeVar

from ngo_admin.core.constants import PERMISSION_KEY_SEPARATOR


class Role(StrEnum):
    """Capability bundles that can be assigned to users."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    FINANCE_MANAGER = "finance_manager"
    CONTENT_MANAGER = "content_manager"
    VOLUNTEER_MANAGER = "volunteer_manager"
    BLOOD_MANAGER = "blood_manager"
    FUNDRAISER = "fundraiser"
    EDITOR = "editor"
    VIEWER = "viewer"
    VOLUNTEER = "volunteer"
    MEMBER = "member"
    USER = "user"


class Module(StrEnum):
    """Functional areas of the admin application, in menu order."""

    DASHBOARD = "dashboard"
    PROJECTS = "projects"
    DONATIONS = "donations"
    CAMPAIGNS = "campaigns"
    FINANCE = "finance"
    VOLUNTEERS = "volunteers"
    TASKS = "tasks"
    EVENTS = "events"
    BLOOD = "blood"
    BLOG = "blog"
    GALLERY = "gallery"
    TEAM = "team"
    REPORTS = "reports"
    MESSAGES = "messages"
    ROLES = "roles"
    HOMEPAGE = "homepage"
    AUDIT = "audit"
    SETTINGS = "settings"
    SEED = "seed"


class Permission(StrEnum):
    """Actions that can be granted on a module."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


E = TypeVar("E", Role, Module, Permission)


def coerce(enum_cls: type[E], value: object) -> E | None:
    """Convert a raw value to an enum member, or None if it is not one.

    Used on the check path, where an unknown value must deny rather
    than raise.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def parse_roles(roles: object) -> list[Role]:
    """Keep the recognised roles from an opaque list of role identifiers.

    Unknown identifiers are dropped. Order is preserved and duplicates
    are removed.
    """
    if isinstance(roles, str) or not hasattr(roles, "__iter__"):
        return []

    parsed: list[Role] = []
    for raw in roles:
        role = coerce(Role, raw)
        if role is not None and role not in parsed:
            parsed.append(role)
    return parsed


class InvalidPermissionKeyError(ValueError):
    """Raised when a string is not a valid ``role:module:permission`` key."""


class PermissionKey(NamedTuple):
    """A (role, module, permission) triple."""

    role: Role
    module: Module
    permission: Permission

    def encode(self) -> str:
        """Return the storage form ``"{role}:{module}:{permission}"``."""
        return PERMISSION_KEY_SEPARATOR.join(
            (self.role.value, self.module.value, self.permission.value)
        )

    @classmethod
    def parse(cls, raw: str) -> "PermissionKey":
        """Parse the storage form back into a key.

        Raises:
            InvalidPermissionKeyError: If the string does not have exactly
                three parts or any part is not a known member
        """
        parts = raw.split(PERMISSION_KEY_SEPARATOR)
        if len(parts) != 3:
            raise InvalidPermissionKeyError(
                f"Expected 'role:module:permission', got {raw!r}"
            )

        role = coerce(Role, parts[0])
        module = coerce(Module, parts[1])
        permission = coerce(Permission, parts[2])
        if role is None:
            raise InvalidPermissionKeyError(f"Unknown role {parts[0]!r} in {raw!r}")
        if module is None:
            raise InvalidPermissionKeyError(f"Unknown module {parts[1]!r} in {raw!r}")
        if permission is None:
            raise InvalidPermissionKeyError(
                f"Unknown permission {parts[2]!r} in {raw!r}"
            )
        return cls(role, module, permission)

    @classmethod
    def from_values(cls, role: object, module: object, permission: object) -> "PermissionKey | None":
        """Build a key from raw values, or return None if any is unknown."""
        parsed_role = coerce(Role, role)
        parsed_module = coerce(Module, module)
        parsed_permission = coerce(Permission, permission)
        if parsed_role is None or parsed_module is None or parsed_permission is None:
            return None
        return cls(parsed_role, parsed_module, parsed_permission)

    def __str__(self) -> str:
        return self.encode()
