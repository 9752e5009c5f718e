"""Tests for roles, modules, permissions and the structured key."""

import pytest

from ngo_admin.core.permissions.types import (
    InvalidPermissionKeyError,
    Module,
    Permission,
    PermissionKey,
    Role,
    coerce,
    parse_roles,
)


pytestmark = pytest.mark.unit


class TestEnumerations:
    """The closed sets of roles, modules and permissions."""

    def test_role_count(self):
        assert len(Role) == 12

    def test_modules_in_menu_order(self):
        modules = list(Module)
        assert len(modules) == 19
        assert modules[0] is Module.DASHBOARD
        assert modules[-1] is Module.SEED

    def test_permission_values(self):
        assert [p.value for p in Permission] == ["view", "create", "edit", "delete"]


class TestCoerce:
    """Tests for lenient enum conversion."""

    def test_known_string(self):
        assert coerce(Role, "viewer") is Role.VIEWER

    def test_member_passes_through(self):
        assert coerce(Module, Module.BLOG) is Module.BLOG

    @pytest.mark.parametrize("value", ["ghost", "", None, 3, "VIEWER"])
    def test_unknown_value_is_none(self, value):
        assert coerce(Role, value) is None


class TestParseRoles:
    """Tests for filtering opaque role lists."""

    def test_drops_unknown_and_duplicates(self):
        assert parse_roles(["viewer", "ghost", "viewer", "editor"]) == [
            Role.VIEWER,
            Role.EDITOR,
        ]

    def test_plain_string_is_not_a_role_list(self):
        assert parse_roles("admin") == []

    def test_non_iterable(self):
        assert parse_roles(None) == []

    def test_accepts_enum_members(self):
        assert parse_roles((Role.ADMIN,)) == [Role.ADMIN]


class TestPermissionKey:
    """Tests for encoding and parsing override keys."""

    def test_encode(self):
        key = PermissionKey(Role.VIEWER, Module.FINANCE, Permission.VIEW)
        assert key.encode() == "viewer:finance:view"
        assert str(key) == "viewer:finance:view"

    def test_parse(self):
        key = PermissionKey.parse("admin:settings:delete")
        assert key == PermissionKey(Role.ADMIN, Module.SETTINGS, Permission.DELETE)

    @pytest.mark.parametrize(
        "raw",
        [
            "viewer:finance",
            "viewer:finance:view:extra",
            "ghost:finance:view",
            "viewer:nowhere:view",
            "viewer:finance:approve",
            "",
        ],
    )
    def test_parse_rejects_malformed(self, raw):
        with pytest.raises(InvalidPermissionKeyError):
            PermissionKey.parse(raw)

    def test_invalid_key_error_is_value_error(self):
        assert issubclass(InvalidPermissionKeyError, ValueError)

    def test_from_values(self):
        key = PermissionKey.from_values("editor", "blog", "edit")
        assert key == PermissionKey(Role.EDITOR, Module.BLOG, Permission.EDIT)

    def test_from_values_unknown_is_none(self):
        assert PermissionKey.from_values("editor", "blog", "publish") is None
