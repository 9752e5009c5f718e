"""Pydantic schemas for navigation."""

from pydantic import BaseModel, ConfigDict

from ngo_admin.core.permissions import Module


class MenuItemResponse(BaseModel):
    """A sidebar entry the caller may see."""

    model_config = ConfigDict(from_attributes=True)

    module: Module
    label: str
    path: str
    icon: str


class MenuResponse(BaseModel):
    items: list[MenuItemResponse]


class RouteDecisionResponse(BaseModel):
    """Whether the caller may open a path, and where to go if not."""

    model_config = ConfigDict(from_attributes=True)

    path: str
    allowed: bool
    module: Module | None
    redirect_to: str | None = None
