"""Admin navigation module: menu filtering and route guarding."""

from ngo_admin.modules.navigation.routes import router


__all__ = ["router"]
