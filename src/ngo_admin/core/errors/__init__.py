"""Error handling module with RFC 7807 Problem Details."""

from ngo_admin.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    OverrideLoadError,
    OverridePayloadError,
    OverrideSaveError,
    ProtectedRoleError,
    ServiceUnavailableError,
    SettingsStoreError,
    StaleRevisionError,
    ValidationError,
)
from ngo_admin.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    "ForbiddenError",
    "OverrideLoadError",
    "OverridePayloadError",
    "OverrideSaveError",
    "ProtectedRoleError",
    "ServiceUnavailableError",
    "SettingsStoreError",
    "StaleRevisionError",
    "ValidationError",
    # Handlers
    "FieldError",
    "ProblemDetail",
    "register_exception_handlers",
]
