"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data."""

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when data fails validation.

    Example:
        raise ValidationError(
            "Invalid override payload",
            errors=[{"field": "viewer:finance:view", "message": "Expected a boolean"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class ForbiddenError(AppException):
    """Raised when the caller's roles do not grant the required permission.

    Example:
        raise ForbiddenError(
            "Insufficient permissions",
            details={"required_permission": "finance:view"}
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class BadRequestError(AppException):
    """Raised for general client errors."""

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class ServiceUnavailableError(AppException):
    """Raised when a required service is unavailable."""

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503


# ============================================================
# Permission engine errors
# ============================================================


class ProtectedRoleError(BadRequestError):
    """Raised when an override targets a role whose grants are fixed.

    super_admin always resolves to allowed, so its cells cannot be toggled.
    """

    message = "Permissions for this role cannot be overridden"
    error_code = "protected_role"

    def __init__(self, role: str, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["role"] = role
        super().__init__(details=details, **kwargs)


class OverridePayloadError(ValidationError):
    """Raised when a stored override blob is not a JSON object."""

    message = "Invalid permission override payload"
    error_code = "invalid_override_payload"


class SettingsStoreError(ServiceUnavailableError):
    """Raised by a settings backend when the underlying storage fails."""

    message = "Settings store unavailable"
    error_code = "settings_store_unavailable"


class StaleRevisionError(ConflictError):
    """Raised when a save is based on an outdated settings revision.

    Another administrator saved after this copy was loaded. Reload to
    pick up their changes before saving again.
    """

    message = "Permission overrides were changed by someone else; reload before saving"
    error_code = "stale_revision"

    def __init__(self, expected: int, actual: int | None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["expected_revision"] = expected
        details["current_revision"] = actual
        super().__init__(details=details, **kwargs)


class OverrideLoadError(ServiceUnavailableError):
    """Raised when permission overrides cannot be loaded."""

    message = "Permission overrides could not be loaded"
    error_code = "override_load_failed"


class OverrideSaveError(ServiceUnavailableError):
    """Raised when permission overrides cannot be saved.

    The in-memory overrides are left untouched so the save can be retried.
    """

    message = "Permission overrides could not be saved"
    error_code = "override_save_failed"
