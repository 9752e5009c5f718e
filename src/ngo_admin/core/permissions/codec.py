"""Encoding of permission overrides at the storage boundary.

Stored form is a JSON object whose keys are ``"{role}:{module}:{permission}"``
strings and whose values are booleans::

    {"viewer:finance:view": true, "admin:settings:delete": false}

In memory the keys are PermissionKey tuples. Keys are only turned into
strings here.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ngo_admin.core.errors import OverridePayloadError
from ngo_admin.core.permissions.overrides import PROTECTED_ROLES
from ngo_admin.core.permissions.types import InvalidPermissionKeyError, PermissionKey


@dataclass(frozen=True)
class RejectedEntry:
    """A stored entry that was skipped while decoding."""

    key: str
    reason: str


@dataclass
class DecodedOverrides:
    """Result of decoding a stored payload."""

    entries: dict[PermissionKey, bool] = field(default_factory=dict)
    rejected: list[RejectedEntry] = field(default_factory=list)


def encode_overrides(overrides: Mapping[PermissionKey, bool]) -> dict[str, bool]:
    """Convert an override map to its JSON-ready form, keys sorted."""
    return {key.encode(): bool(value) for key, value in sorted(overrides.items())}


def dumps_overrides(overrides: Mapping[PermissionKey, bool]) -> str:
    """Serialize an override map to a JSON string."""
    return json.dumps(encode_overrides(overrides), sort_keys=True)


def _load_json_object(raw: Any) -> dict[str, Any]:
    value = raw
    # Older rows hold the object as a JSON-encoded string, sometimes twice
    for _ in range(2):
        if not isinstance(value, (str, bytes, bytearray)):
            break
        if isinstance(value, str) and not value.strip():
            return {}
        try:
            value = json.loads(value)
        except ValueError as exc:
            raise OverridePayloadError(
                f"Override payload is not valid JSON: {exc}",
            ) from exc

    if value is None:
        return {}
    if not isinstance(value, dict):
        raise OverridePayloadError(
            "Override payload must be a JSON object",
            details={"payload_type": type(value).__name__},
        )
    return value


def decode_overrides(raw: Any) -> DecodedOverrides:
    """Parse a stored payload into structured overrides.

    ``raw`` may be a dict, a JSON string or bytes, or None (no overrides).
    Entries with an unknown key, a non-boolean value, or a protected role
    are skipped and listed in ``rejected``.

    Raises:
        OverridePayloadError: If the payload is not JSON or not an object
    """
    payload = _load_json_object(raw)
    decoded = DecodedOverrides()

    for raw_key, value in payload.items():
        try:
            key = PermissionKey.parse(str(raw_key))
        except InvalidPermissionKeyError as exc:
            decoded.rejected.append(RejectedEntry(str(raw_key), str(exc)))
            continue

        if not isinstance(value, bool):
            decoded.rejected.append(
                RejectedEntry(str(raw_key), f"Expected a boolean, got {type(value).__name__}")
            )
            continue

        if key.role in PROTECTED_ROLES:
            decoded.rejected.append(
                RejectedEntry(str(raw_key), f"Role {key.role.value!r} cannot be overridden")
            )
            continue

        decoded.entries[key] = value

    return decoded
