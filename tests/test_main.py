"""Tests for application startup and shutdown."""

from unittest.mock import AsyncMock

import pytest

from ngo_admin.core.errors import OverrideLoadError
from ngo_admin.core.permissions import OverridePersistence, PermissionService
from ngo_admin.core.settings import MemorySettingsBackend
from ngo_admin.main import create_app


@pytest.mark.asyncio
async def test_startup_loads_overrides():
    """Overrides stored before startup are in effect once the app is up."""
    backend = MemorySettingsBackend({"permission_overrides": {"member:donations:view": True}})
    service = PermissionService(OverridePersistence(backend))
    app = create_app(service)

    async with app.router.lifespan_context(app):
        assert app.state.permissions is service
        assert service.loaded is True
        assert service.can_view_module(["member"], "donations") is True


@pytest.mark.asyncio
async def test_startup_survives_load_failure():
    """A failed load at startup leaves the compiled defaults in effect."""
    persistence = AsyncMock(spec=OverridePersistence)
    persistence.load.side_effect = OverrideLoadError("settings store unavailable")
    service = PermissionService(persistence)
    app = create_app(service)

    async with app.router.lifespan_context(app):
        assert service.loaded is False
        assert service.can_view_module(["member"], "donations") is False
        assert service.can_view_module(["member"], "dashboard") is True


def test_service_is_available_before_startup():
    service = PermissionService()
    app = create_app(service)

    assert app.state.permissions is service
