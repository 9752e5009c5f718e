"""Tests for loading and saving overrides through a settings backend."""

from unittest.mock import AsyncMock

import pytest

from ngo_admin.core.errors import (
    OverrideLoadError,
    OverrideSaveError,
    SettingsStoreError,
    StaleRevisionError,
)
from ngo_admin.core.permissions import OverridePersistence
from ngo_admin.core.permissions.types import Module, Permission, PermissionKey, Role
from ngo_admin.core.settings import StoredSetting


pytestmark = pytest.mark.unit

VIEWER_FINANCE_VIEW = PermissionKey(Role.VIEWER, Module.FINANCE, Permission.VIEW)


class TestOverridePersistence:
    """Tests for OverridePersistence."""

    @pytest.fixture
    def backend(self) -> AsyncMock:
        backend = AsyncMock()
        backend.fetch.return_value = None
        backend.store.return_value = 1
        return backend

    async def test_load_uses_well_known_key(self, backend):
        persistence = OverridePersistence(backend)
        await persistence.load()

        backend.fetch.assert_awaited_once_with("permission_overrides")

    async def test_load_custom_key(self, backend):
        persistence = OverridePersistence(backend, key="acl")
        await persistence.load()

        backend.fetch.assert_awaited_once_with("acl")

    async def test_load_missing_is_empty_revision_zero(self, backend):
        loaded = await OverridePersistence(backend).load()

        assert loaded.entries == {}
        assert loaded.revision == 0

    async def test_load_legacy_string_payload(self, backend):
        backend.fetch.return_value = StoredSetting(
            value='{"viewer:finance:view": true}', revision=4
        )

        loaded = await OverridePersistence(backend).load()

        assert loaded.entries == {VIEWER_FINANCE_VIEW: True}
        assert loaded.revision == 4

    async def test_load_malformed_payload_raises(self, backend):
        backend.fetch.return_value = StoredSetting(value="[true]", revision=2)

        with pytest.raises(OverrideLoadError) as exc_info:
            await OverridePersistence(backend).load()

        assert exc_info.value.details == {"setting_key": "permission_overrides"}

    async def test_load_backend_failure_raises(self, backend):
        backend.fetch.side_effect = SettingsStoreError("connection refused")

        with pytest.raises(OverrideLoadError) as exc_info:
            await OverridePersistence(backend).load()

        assert "connection refused" in exc_info.value.message
        assert exc_info.value.status_code == 503

    async def test_save_writes_full_map_with_expected_revision(self, backend):
        revision = await OverridePersistence(backend).save({VIEWER_FINANCE_VIEW: True}, 0)

        assert revision == 1
        backend.store.assert_awaited_once_with(
            "permission_overrides", {"viewer:finance:view": True}, 0
        )

    async def test_save_backend_failure_raises(self, backend):
        backend.store.side_effect = SettingsStoreError("read only")

        with pytest.raises(OverrideSaveError):
            await OverridePersistence(backend).save({}, 3)

    async def test_save_stale_revision_propagates(self, backend):
        backend.store.side_effect = StaleRevisionError(3, 5)

        with pytest.raises(StaleRevisionError):
            await OverridePersistence(backend).save({}, 3)
