"""Compiled default permission policy.

DEFAULT_GRANTS is the out-of-the-box grant set, kept as a literal table so
it can be reviewed as data. A (role, module, permission) triple that does
not appear in it is denied. super_admin is granted everything regardless
of what the table says.
"""

from collections.abc import Mapping
from types import MappingProxyType

from ngo_admin.core.permissions.types import Module, Permission, PermissionKey, Role


V = Permission.VIEW
C = Permission.CREATE
E = Permission.EDIT
D = Permission.DELETE

FULL = frozenset({V, C, E, D})


DEFAULT_GRANTS: Mapping[Role, Mapping[Module, frozenset[Permission]]] = MappingProxyType(
    {
        Role.SUPER_ADMIN: {module: FULL for module in Module},
        Role.ADMIN: {
            Module.DASHBOARD: frozenset({V}),
            Module.PROJECTS: frozenset({V, C, E}),
            Module.DONATIONS: frozenset({V, C, E}),
            Module.CAMPAIGNS: frozenset({V, C, E}),
            Module.FINANCE: frozenset({V}),
            Module.VOLUNTEERS: frozenset({V, C, E}),
            Module.TASKS: frozenset({V, C, E}),
            Module.EVENTS: frozenset({V, C, E}),
            Module.BLOOD: frozenset({V, C, E}),
            Module.BLOG: frozenset({V, C, E}),
            Module.GALLERY: frozenset({V, C, E}),
            Module.TEAM: frozenset({V, C, E}),
            Module.REPORTS: frozenset({V}),
            Module.MESSAGES: frozenset({V, E}),
            Module.ROLES: frozenset({V}),
            Module.HOMEPAGE: frozenset({V, E}),
            Module.SETTINGS: frozenset({V, E}),
            Module.AUDIT: frozenset({V}),
        },
        Role.FINANCE_MANAGER: {
            Module.DASHBOARD: frozenset({V}),
            Module.DONATIONS: frozenset({V, C, E}),
            Module.CAMPAIGNS: frozenset({V, C, E}),
            Module.FINANCE: FULL,
            Module.REPORTS: frozenset({V}),
        },
        Role.CONTENT_MANAGER: {
            Module.DASHBOARD: frozenset({V}),
            Module.BLOG: FULL,
            Module.GALLERY: FULL,
            Module.EVENTS: frozenset({V, C, E}),
            Module.HOMEPAGE: frozenset({V, E}),
            Module.TEAM: frozenset({V, C, E}),
        },
        Role.VOLUNTEER_MANAGER: {
            Module.DASHBOARD: frozenset({V}),
            Module.VOLUNTEERS: FULL,
            Module.TASKS: FULL,
            Module.EVENTS: frozenset({V}),
        },
        Role.BLOOD_MANAGER: {
            Module.DASHBOARD: frozenset({V}),
            Module.BLOOD: FULL,
        },
        # fundraiser and user have no default grants
        Role.FUNDRAISER: {},
        Role.EDITOR: {
            Module.DASHBOARD: frozenset({V}),
            Module.BLOG: frozenset({V, C, E}),
            Module.GALLERY: frozenset({V, C, E}),
            Module.EVENTS: frozenset({V, C, E}),
        },
        Role.VIEWER: {
            Module.DASHBOARD: frozenset({V}),
            Module.PROJECTS: frozenset({V}),
            Module.DONATIONS: frozenset({V}),
            Module.EVENTS: frozenset({V}),
            Module.REPORTS: frozenset({V}),
        },
        Role.VOLUNTEER: {
            Module.DASHBOARD: frozenset({V}),
        },
        Role.MEMBER: {
            Module.DASHBOARD: frozenset({V}),
        },
        Role.USER: {},
    }
)


def get_default_permission(role: object, module: object, permission: object) -> bool:
    """Return the compiled default for a (role, module, permission) triple.

    Total and pure: anything outside the enumerations resolves to False.
    """
    key = PermissionKey.from_values(role, module, permission)
    if key is None:
        return False
    return default_for(key)


def default_for(key: PermissionKey) -> bool:
    """Return the compiled default for an already-parsed key."""
    if key.role is Role.SUPER_ADMIN:
        return True
    return key.permission in DEFAULT_GRANTS.get(key.role, {}).get(key.module, frozenset())

