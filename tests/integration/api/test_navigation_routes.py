"""Integration tests for the navigation API."""

import pytest
from httpx import AsyncClient

from ngo_admin.core.permissions import PermissionService


pytestmark = pytest.mark.integration


class TestMenu:
    """Tests for GET /navigation/menu."""

    async def test_member_menu(self, client: AsyncClient, assign_roles):
        headers = await assign_roles("member")

        response = await client.get("/api/v1/navigation/menu", headers=headers)

        assert response.status_code == 200
        items = response.json()["items"]
        assert [item["module"] for item in items] == ["dashboard"]
        assert items[0]["path"] == "/admin"

    async def test_override_shows_donations(
        self, client: AsyncClient, assign_roles, permission_service: PermissionService
    ):
        permission_service.toggle("member", "donations", "view")
        headers = await assign_roles("member")

        response = await client.get("/api/v1/navigation/menu", headers=headers)

        modules = [item["module"] for item in response.json()["items"]]
        assert modules == ["dashboard", "donations"]

    async def test_anonymous_menu_is_empty(self, client: AsyncClient):
        response = await client.get("/api/v1/navigation/menu")
        assert response.json() == {"items": []}


class TestGuard:
    """Tests for GET /navigation/guard."""

    async def test_allowed(self, client: AsyncClient, assign_roles):
        headers = await assign_roles("finance_manager")

        response = await client.get(
            "/api/v1/navigation/guard", params={"path": "/admin/finance"}, headers=headers
        )

        assert response.json() == {
            "path": "/admin/finance",
            "allowed": True,
            "module": "finance",
            "redirect_to": None,
        }

    async def test_denied_redirects_to_dashboard(self, client: AsyncClient, assign_roles):
        headers = await assign_roles("member")

        response = await client.get(
            "/api/v1/navigation/guard", params={"path": "/admin/donations"}, headers=headers
        )

        data = response.json()
        assert data["allowed"] is False
        assert data["redirect_to"] == "/admin"

    async def test_anonymous_redirects_home(self, client: AsyncClient):
        response = await client.get("/api/v1/navigation/guard", params={"path": "/admin/roles"})

        assert response.json()["redirect_to"] == "/"

    async def test_path_is_required(self, client: AsyncClient):
        response = await client.get("/api/v1/navigation/guard")
        assert response.status_code == 422
