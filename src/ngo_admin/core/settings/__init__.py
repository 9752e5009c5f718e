"""Key-value settings storage (database, Redis, or in-process)."""

from ngo_admin.core.settings.backends import (
    MemorySettingsBackend,
    RedisSettingsBackend,
    SettingsBackend,
    SqlSettingsBackend,
    StoredSetting,
    build_settings_backend,
)
from ngo_admin.core.settings.models import SiteSetting


__all__ = [
    "MemorySettingsBackend",
    "RedisSettingsBackend",
    "SettingsBackend",
    "SiteSetting",
    "SqlSettingsBackend",
    "StoredSetting",
    "build_settings_backend",
]
