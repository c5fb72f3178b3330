"""
Sidebar Navigation

Role-filtered navigation entries for the portal sidebar, with active-state
matching and the unread notification badge. The frontend renders what
build_sidebar returns.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, List

from .models.user import UserRole

DEFAULT_ROLE = UserRole.EMPLOYEE
UNREAD_BADGE = "unread_notifications"


@dataclass(frozen=True)
class NavItem:
    """
    One sidebar entry.

    roles: None means visible to everyone.
    badge: name of a live counter shown next to the label.
    """
    name: str
    href: str
    icon: str
    roles: Optional[Tuple[UserRole, ...]] = None
    badge: Optional[str] = None

    def visible_to(self, role: Optional[UserRole]) -> bool:
        return self.roles is None or (role or DEFAULT_ROLE) in self.roles


_STAFF = (UserRole.AGENT, UserRole.ADMIN)
_ADMIN = (UserRole.ADMIN,)

NAVIGATION: Tuple[NavItem, ...] = (
    NavItem("Dashboard", "/", "home"),
    NavItem("All Tickets", "/tickets", "ticket", roles=_STAFF),
    NavItem("My Tickets", "/tickets/my", "ticket"),
    NavItem("Assigned Tickets", "/tickets/assigned", "ticket", roles=_STAFF),
    NavItem("Departments", "/departments", "users", roles=_STAFF),
    NavItem("FAQ", "/faq", "help-circle"),
    NavItem("Notifications", "/notifications", "bell", badge=UNREAD_BADGE),
    NavItem("Document Management", "/admin/documents", "file-text", roles=_ADMIN),
    NavItem("AI Assistant", "/ai/assistant", "bot"),
    NavItem("AI Insights", "/ai/insights", "bar-chart-3", roles=_ADMIN),
    NavItem("Profile", "/profile", "user"),
)


def filter_navigation(
    role: Optional[UserRole], items: Tuple[NavItem, ...] = NAVIGATION
) -> List[NavItem]:
    """Entries visible to a role, in declaration order"""
    return [item for item in items if item.visible_to(role)]


def is_active(pathname: str, href: str) -> bool:
    """Exact match, or a descendant path; "/" only ever matches itself"""
    if pathname == href:
        return True
    return href != "/" and pathname.startswith(href + "/")


def badge_value(count: Optional[int]) -> Optional[int]:
    """Badge is shown only for a positive count"""
    if count is not None and count > 0:
        return count
    return None


def footer_for(user: Optional[dict]) -> Optional[dict]:
    if not user:
        return None
    name = user.get("name") or ""
    role = user.get("role")
    return {
        "initial": name[:1].upper(),
        "name": name,
        "role": role.value if isinstance(role, UserRole) else role,
    }


def build_sidebar(user: Optional[dict], unread_count: int, pathname: str) -> dict:
    """
    Sidebar model for the current user.

    Args:
        user: {"name", "role"} of the signed-in user, or None
        unread_count: live unread notification count
        pathname: current location path
    """
    role = user.get("role") if user else None
    counters = {UNREAD_BADGE: unread_count}

    items = []
    for item in filter_navigation(role):
        items.append({
            "name": item.name,
            "href": item.href,
            "icon": item.icon,
            "active": is_active(pathname, item.href),
            "badge": badge_value(counters.get(item.badge)) if item.badge else None,
        })

    return {
        "title": "Helpdesk",
        "new_ticket_href": "/tickets/new",
        "items": items,
        "footer": footer_for(user),
    }
