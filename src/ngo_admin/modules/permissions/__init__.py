"""Permission matrix administration module."""

from ngo_admin.modules.permissions.routes import router


__all__ = ["router"]
