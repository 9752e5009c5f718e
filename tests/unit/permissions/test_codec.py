"""Tests for encoding and decoding stored override payloads."""

import json

import pytest

from ngo_admin.core.errors import OverridePayloadError
from ngo_admin.core.permissions.codec import (
    decode_overrides,
    dumps_overrides,
    encode_overrides,
)
from ngo_admin.core.permissions.types import Module, Permission, PermissionKey, Role


pytestmark = pytest.mark.unit

VIEWER_FINANCE_VIEW = PermissionKey(Role.VIEWER, Module.FINANCE, Permission.VIEW)
ADMIN_SETTINGS_DELETE = PermissionKey(Role.ADMIN, Module.SETTINGS, Permission.DELETE)


class TestEncode:
    """Tests for the storage form."""

    def test_encode_uses_string_keys_sorted(self):
        encoded = encode_overrides({VIEWER_FINANCE_VIEW: True, ADMIN_SETTINGS_DELETE: False})

        assert list(encoded) == ["admin:settings:delete", "viewer:finance:view"]
        assert encoded["viewer:finance:view"] is True

    def test_dumps_is_json_object(self):
        payload = dumps_overrides({VIEWER_FINANCE_VIEW: True})
        assert json.loads(payload) == {"viewer:finance:view": True}

    def test_empty(self):
        assert dumps_overrides({}) == "{}"


class TestDecode:
    """Tests for decode_overrides."""

    def test_decode_dict(self):
        decoded = decode_overrides({"viewer:finance:view": True})

        assert decoded.entries == {VIEWER_FINANCE_VIEW: True}
        assert decoded.rejected == []

    def test_decode_json_string(self):
        decoded = decode_overrides('{"admin:settings:delete": false}')
        assert decoded.entries == {ADMIN_SETTINGS_DELETE: False}

    def test_decode_bytes(self):
        decoded = decode_overrides(b'{"admin:settings:delete": false}')
        assert decoded.entries == {ADMIN_SETTINGS_DELETE: False}

    def test_decode_double_encoded_string(self):
        """Rows written as a JSON string holding the JSON object are accepted."""
        raw = json.dumps(json.dumps({"viewer:finance:view": True}))
        decoded = decode_overrides(raw)

        assert decoded.entries == {VIEWER_FINANCE_VIEW: True}

    @pytest.mark.parametrize("raw", [None, "", "   ", "null"])
    def test_empty_payloads(self, raw):
        decoded = decode_overrides(raw)
        assert decoded.entries == {}
        assert decoded.rejected == []

    def test_unknown_keys_are_rejected_per_entry(self):
        decoded = decode_overrides(
            {
                "viewer:finance:view": True,
                "ghost:finance:view": True,
                "viewer:finance": True,
            }
        )

        assert decoded.entries == {VIEWER_FINANCE_VIEW: True}
        assert sorted(r.key for r in decoded.rejected) == [
            "ghost:finance:view",
            "viewer:finance",
        ]

    def test_non_boolean_values_are_rejected(self):
        decoded = decode_overrides({"viewer:finance:view": "true", "admin:settings:delete": 0})

        assert decoded.entries == {}
        assert len(decoded.rejected) == 2
        assert "boolean" in decoded.rejected[0].reason

    def test_super_admin_entries_are_rejected(self):
        decoded = decode_overrides({"super_admin:settings:delete": False})

        assert decoded.entries == {}
        assert decoded.rejected[0].key == "super_admin:settings:delete"

    def test_invalid_json_raises(self):
        with pytest.raises(OverridePayloadError):
            decode_overrides("{not json")

    @pytest.mark.parametrize("raw", ["[1, 2]", "42", '"just a string"', [1, 2]])
    def test_non_object_raises(self, raw):
        with pytest.raises(OverridePayloadError):
            decode_overrides(raw)
