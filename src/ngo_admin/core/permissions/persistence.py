"""Loading and saving permission overrides through a settings backend.

The whole override map lives in one setting (``permission_overrides`` by
default) and is always written as a full replace.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog

from ngo_admin.core.constants import PERMISSION_OVERRIDES_KEY
from ngo_admin.core.errors import (
    OverrideLoadError,
    OverridePayloadError,
    OverrideSaveError,
    SettingsStoreError,
)
from ngo_admin.core.permissions.codec import RejectedEntry, decode_overrides, encode_overrides
from ngo_admin.core.permissions.types import PermissionKey
from ngo_admin.core.settings import SettingsBackend


logger = structlog.get_logger()


@dataclass
class LoadedOverrides:
    """Overrides read from storage, with the revision they were read at."""

    entries: dict[PermissionKey, bool]
    revision: int
    rejected: list[RejectedEntry] = field(default_factory=list)


class OverridePersistence:
    """Reads and writes the override map as a single JSON setting."""

    def __init__(self, backend: SettingsBackend, key: str = PERMISSION_OVERRIDES_KEY) -> None:
        self.backend = backend
        self.key = key

    async def load(self) -> LoadedOverrides:
        """Fetch and decode the stored overrides.

        A missing setting means no overrides at revision 0.

        Raises:
            OverrideLoadError: If the backend fails or the payload is malformed
        """
        try:
            stored = await self.backend.fetch(self.key)
        except SettingsStoreError as exc:
            raise OverrideLoadError(
                f"Could not read {self.key!r}: {exc.message}",
                details={"setting_key": self.key},
            ) from exc

        if stored is None:
            return LoadedOverrides(entries={}, revision=0)

        try:
            decoded = decode_overrides(stored.value)
        except OverridePayloadError as exc:
            raise OverrideLoadError(
                f"Stored {self.key!r} is malformed: {exc.message}",
                details={"setting_key": self.key},
            ) from exc

        for rejected in decoded.rejected:
            logger.warning(
                "override_entry_rejected",
                setting_key=self.key,
                key=rejected.key,
                reason=rejected.reason,
            )

        return LoadedOverrides(
            entries=decoded.entries,
            revision=stored.revision,
            rejected=decoded.rejected,
        )

    async def save(self, overrides: Mapping[PermissionKey, bool], expected_revision: int) -> int:
        """Overwrite the stored overrides.

        Args:
            overrides: The complete override map to store
            expected_revision: Revision this map was based on

        Returns:
            The new revision

        Raises:
            StaleRevisionError: If someone else saved in the meantime
            OverrideSaveError: If the backend fails
        """
        try:
            return await self.backend.store(
                self.key, encode_overrides(overrides), expected_revision
            )
        except SettingsStoreError as exc:
            raise OverrideSaveError(
                f"Could not write {self.key!r}: {exc.message}",
                details={"setting_key": self.key},
            ) from exc
