"""Navigation API routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from ngo_admin.core.permissions.dependencies import CurrentRoles, PermissionServiceDep
from ngo_admin.core.permissions.navigation import guard_route, visible_menu
from ngo_admin.modules.navigation.schemas import (
    MenuItemResponse,
    MenuResponse,
    RouteDecisionResponse,
)


router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("/menu", response_model=MenuResponse)
async def get_menu(service: PermissionServiceDep, roles: CurrentRoles) -> MenuResponse:
    """Get the admin menu entries the caller can view."""
    return MenuResponse(
        items=[MenuItemResponse.model_validate(item) for item in visible_menu(service, roles)]
    )


@router.get("/guard", response_model=RouteDecisionResponse)
async def check_route(
    service: PermissionServiceDep,
    roles: CurrentRoles,
    path: Annotated[str, Query(min_length=1)],
) -> RouteDecisionResponse:
    """Decide whether the caller may open a frontend path."""
    decision = guard_route(service, roles, path)
    return RouteDecisionResponse(
        path=path,
        allowed=decision.allowed,
        module=decision.module,
        redirect_to=decision.redirect_to,
    )
