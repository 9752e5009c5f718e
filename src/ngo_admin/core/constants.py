"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Settings store
PERMISSION_OVERRIDES_KEY = "permission_overrides"
DEFAULT_SETTINGS_PREFIX = "settings:"
MAX_SETTING_KEY_LENGTH = 100

# Override keys are "{role}:{module}:{permission}"
PERMISSION_KEY_SEPARATOR = ":"

# Role assignment table
MAX_ROLE_NAME_LENGTH = 50

# Navigation
ADMIN_ROOT_PATH = "/admin"
PUBLIC_ROOT_PATH = "/"

# Request headers
USER_ID_HEADER = "X-User-Id"
