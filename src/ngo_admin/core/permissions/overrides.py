"""In-memory store of permission overrides.

The store only ever holds entries that differ from the compiled default.
Setting a cell back to its default value removes the entry, so the stored
map is always the minimal delta over the default policy.
"""

from collections.abc import Callable, Iterator, Mapping

from ngo_admin.core.errors import ProtectedRoleError
from ngo_admin.core.permissions.defaults import default_for
from ngo_admin.core.permissions.types import PermissionKey, Role


PROTECTED_ROLES = frozenset({Role.SUPER_ADMIN})


class OverrideStore:
    """Sparse map of (role, module, permission) keys to booleans.

    Args:
        default_lookup: Function giving the compiled default for a key
    """

    def __init__(self, default_lookup: Callable[[PermissionKey], bool] = default_for) -> None:
        self._default = default_lookup
        self._entries: dict[PermissionKey, bool] = {}

    def get(self, key: PermissionKey) -> bool | None:
        """Return the override for a key, or None if there is none."""
        return self._entries.get(key)

    def set(self, key: PermissionKey, value: bool) -> None:
        """Insert or update one override.

        A value equal to the default removes the entry instead.

        Raises:
            ProtectedRoleError: If the key belongs to a protected role
        """
        if key.role in PROTECTED_ROLES:
            raise ProtectedRoleError(key.role.value)

        if value == self._default(key):
            self._entries.pop(key, None)
        else:
            self._entries[key] = value

    def remove(self, key: PermissionKey) -> None:
        """Delete one override if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every override."""
        self._entries = {}

    def toggle(self, key: PermissionKey) -> bool:
        """Flip the effective value of a key and return the new value.

        A cell at its default gains an override holding the opposite value.
        A cell with an override returns to its default.
        """
        default = self._default(key)
        current = self._entries.get(key, default)

        if current == default:
            self.set(key, not current)
        else:
            self.remove(key)
        return self._entries.get(key, default)

    def replace(self, entries: Mapping[PermissionKey, bool]) -> None:
        """Swap the whole contents in one step.

        Entries equal to the default are dropped. Protected-role entries
        are rejected before anything is swapped.
        """
        for key in entries:
            if key.role in PROTECTED_ROLES:
                raise ProtectedRoleError(key.role.value)

        self._entries = {
            key: value for key, value in entries.items() if value != self._default(key)
        }

    def snapshot(self) -> dict[PermissionKey, bool]:
        """Return a copy of the current overrides."""
        return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PermissionKey]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"<OverrideStore(entries={len(self._entries)})>"
