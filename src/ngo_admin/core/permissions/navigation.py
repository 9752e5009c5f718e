"""Admin menu catalog and route guarding.

Both are thin layers over ``PermissionService.can_view_module``: the menu
shows only modules the caller can view, and a route under ``/admin`` is
allowed only if its module is viewable.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ngo_admin.core.constants import ADMIN_ROOT_PATH, PUBLIC_ROOT_PATH
from ngo_admin.core.permissions.types import Module, Role


if TYPE_CHECKING:
    from ngo_admin.core.permissions.service import PermissionService


@dataclass(frozen=True)
class MenuItem:
    """One entry of the admin sidebar."""

    module: Module
    label: str
    path: str
    icon: str


ROLE_LABELS: dict[Role, str] = {
    Role.SUPER_ADMIN: "সুপার অ্যাডমিন",
    Role.ADMIN: "অ্যাডমিন",
    Role.FINANCE_MANAGER: "ফিন্যান্স ম্যানেজার",
    Role.CONTENT_MANAGER: "কন্টেন্ট ম্যানেজার",
    Role.VOLUNTEER_MANAGER: "ভলান্টিয়ার ম্যানেজার",
    Role.BLOOD_MANAGER: "ব্লাড ম্যানেজার",
    Role.FUNDRAISER: "ফান্ডরেইজার",
    Role.EDITOR: "এডিটর",
    Role.VIEWER: "ভিউয়ার",
    Role.VOLUNTEER: "স্বেচ্ছাসেবক",
    Role.MEMBER: "সদস্য",
    Role.USER: "ব্যবহারকারী",
}

MODULE_LABELS: dict[Module, str] = {
    Module.DASHBOARD: "ড্যাশবোর্ড",
    Module.PROJECTS: "প্রকল্প",
    Module.DONATIONS: "অনুদান",
    Module.CAMPAIGNS: "ক্যাম্পেইন",
    Module.FINANCE: "আয়-ব্যয়",
    Module.VOLUNTEERS: "স্বেচ্ছাসেবক",
    Module.TASKS: "টাস্ক",
    Module.EVENTS: "ইভেন্ট",
    Module.BLOOD: "রক্তদান",
    Module.BLOG: "ব্লগ",
    Module.GALLERY: "গ্যালারি",
    Module.TEAM: "টিম",
    Module.REPORTS: "রিপোর্ট",
    Module.MESSAGES: "মেসেজ",
    Module.ROLES: "রোল",
    Module.HOMEPAGE: "হোমপেজ",
    Module.AUDIT: "অডিট লগ",
    Module.SETTINGS: "সেটিংস",
    Module.SEED: "ডেমো ডেটা",
}

# The sidebar spells out the roles page; every other entry uses the module label
MENU_LABELS: dict[Module, str] = {**MODULE_LABELS, Module.ROLES: "রোল ও পারমিশন"}

MENU_ICONS: dict[Module, str] = {
    Module.DASHBOARD: "LayoutDashboard",
    Module.PROJECTS: "FolderOpen",
    Module.DONATIONS: "Heart",
    Module.CAMPAIGNS: "Megaphone",
    Module.FINANCE: "DollarSign",
    Module.VOLUNTEERS: "Users",
    Module.TASKS: "ClipboardList",
    Module.EVENTS: "Calendar",
    Module.BLOOD: "Droplets",
    Module.BLOG: "Newspaper",
    Module.GALLERY: "Image",
    Module.TEAM: "UserCircle",
    Module.REPORTS: "FileText",
    Module.MESSAGES: "MessageSquare",
    Module.ROLES: "Shield",
    Module.HOMEPAGE: "Home",
    Module.AUDIT: "ScrollText",
    Module.SETTINGS: "Settings",
    Module.SEED: "Database",
}


def _menu_path(module: Module) -> str:
    if module is Module.DASHBOARD:
        return ADMIN_ROOT_PATH
    return f"{ADMIN_ROOT_PATH}/{module.value}"


MENU_ITEMS: tuple[MenuItem, ...] = tuple(
    MenuItem(module, MENU_LABELS[module], _menu_path(module), MENU_ICONS[module])
    for module in Module
)


@dataclass(frozen=True)
class RouteDecision:
    """Result of guarding one path.

    Attributes:
        allowed: Whether the caller may open the path
        module: Module the path belongs to, None outside the admin area
        redirect_to: Where to send the caller when not allowed
    """

    allowed: bool
    module: Module | None
    redirect_to: str | None = None


def visible_menu(service: "PermissionService", roles: Iterable[object]) -> list[MenuItem]:
    """Return the menu entries whose module the roles can view."""
    roles = list(roles)
    return [item for item in MENU_ITEMS if service.can_view_module(roles, item.module)]


def module_for_path(path: str) -> Module | None:
    """Map an admin path to its module; the longest matching entry wins."""
    normalized = "/" + path.strip().strip("/")
    matches = [
        item
        for item in MENU_ITEMS
        if normalized == item.path or normalized.startswith(item.path + "/")
    ]
    if not matches:
        return None
    return max(matches, key=lambda item: len(item.path)).module


def guard_route(
    service: "PermissionService", roles: Iterable[object], path: str
) -> RouteDecision:
    """Decide whether the roles may open a path.

    Paths outside the admin area are not guarded here. A denied caller is
    redirected to the admin dashboard if they can see it, otherwise to the
    public home page.
    """
    module = module_for_path(path)
    if module is None:
        return RouteDecision(allowed=True, module=None)

    roles = list(roles)
    if service.can_view_module(roles, module):
        return RouteDecision(allowed=True, module=module)

    if module is not Module.DASHBOARD and service.can_view_module(roles, Module.DASHBOARD):
        return RouteDecision(allowed=False, module=module, redirect_to=ADMIN_ROOT_PATH)
    return RouteDecision(allowed=False, module=module, redirect_to=PUBLIC_ROOT_PATH)
