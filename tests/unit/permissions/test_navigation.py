"""Tests for the admin menu and route guard."""

import pytest

from ngo_admin.core.permissions.navigation import (
    MENU_ITEMS,
    MODULE_LABELS,
    ROLE_LABELS,
    guard_route,
    module_for_path,
    visible_menu,
)
from ngo_admin.core.permissions.types import Module, Role


pytestmark = pytest.mark.unit


class TestCatalog:
    """Tests for the static menu and labels."""

    def test_one_menu_item_per_module_in_order(self):
        assert [item.module for item in MENU_ITEMS] == list(Module)

    def test_every_role_and_module_is_labelled(self):
        assert set(ROLE_LABELS) == set(Role)
        assert set(MODULE_LABELS) == set(Module)

    def test_menu_labels_follow_module_labels(self):
        differing = {
            item.module: item.label
            for item in MENU_ITEMS
            if item.label != MODULE_LABELS[item.module]
        }
        assert differing == {Module.ROLES: "রোল ও পারমিশন"}

    def test_menu_paths(self):
        paths = {item.module: item.path for item in MENU_ITEMS}

        assert paths[Module.DASHBOARD] == "/admin"
        assert paths[Module.BLOOD] == "/admin/blood"
        assert all(item.icon for item in MENU_ITEMS)


class TestVisibleMenu:
    """Tests for visible_menu."""

    def test_member_sees_dashboard_only(self, permission_service):
        items = visible_menu(permission_service, ["member"])
        assert [item.module for item in items] == [Module.DASHBOARD]

    def test_donations_hidden_from_member(self, permission_service):
        modules = {item.module for item in visible_menu(permission_service, ["member"])}
        assert Module.DONATIONS not in modules

    def test_union_of_roles(self, permission_service):
        items = visible_menu(permission_service, ["blood_manager", "editor"])
        assert [item.module for item in items] == [
            Module.DASHBOARD,
            Module.EVENTS,
            Module.BLOOD,
            Module.BLOG,
            Module.GALLERY,
        ]

    def test_override_adds_entry(self, permission_service):
        permission_service.toggle("member", "donations", "view")
        modules = [item.module for item in visible_menu(permission_service, ["member"])]
        assert Module.DONATIONS in modules

    def test_super_admin_sees_everything(self, permission_service):
        assert len(visible_menu(permission_service, ["super_admin"])) == len(MENU_ITEMS)

    def test_no_roles_no_menu(self, permission_service):
        assert visible_menu(permission_service, []) == []


class TestModuleForPath:
    """Tests for mapping paths to modules."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/admin", Module.DASHBOARD),
            ("/admin/", Module.DASHBOARD),
            ("/admin/finance", Module.FINANCE),
            ("/admin/finance/reports/2024", Module.FINANCE),
            ("/admin/blog/new", Module.BLOG),
            ("/admin/unknown-page", Module.DASHBOARD),
            ("/", None),
            ("/donate", None),
            ("/administrator", None),
        ],
    )
    def test_mapping(self, path, expected):
        assert module_for_path(path) is expected


class TestGuardRoute:
    """Tests for guard_route."""

    def test_public_paths_are_allowed(self, permission_service):
        decision = guard_route(permission_service, [], "/projects")
        assert decision.allowed is True
        assert decision.module is None

    def test_allowed_admin_path(self, permission_service):
        decision = guard_route(permission_service, ["finance_manager"], "/admin/finance")
        assert decision.allowed is True
        assert decision.module is Module.FINANCE

    def test_denied_with_dashboard_redirects_to_admin(self, permission_service):
        decision = guard_route(permission_service, ["member"], "/admin/donations")

        assert decision.allowed is False
        assert decision.redirect_to == "/admin"

    def test_denied_without_dashboard_redirects_home(self, permission_service):
        decision = guard_route(permission_service, ["user"], "/admin/donations")

        assert decision.allowed is False
        assert decision.redirect_to == "/"

    def test_denied_dashboard_redirects_home(self, permission_service):
        decision = guard_route(permission_service, ["fundraiser"], "/admin")

        assert decision.allowed is False
        assert decision.module is Module.DASHBOARD
        assert decision.redirect_to == "/"
