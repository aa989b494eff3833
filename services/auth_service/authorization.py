"""
Authorization Gate - the single table of which role may reach which view or action.
Every page and every mutation consults this module instead of checking roles inline.

The gate is client-side policy only; the record store enforces nothing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Union

from services.auth_service.models import UserRole
from services.registry_service.errors import AuthorizationDenial


class View(str, Enum):
    DASHBOARD = "dashboard"
    REGISTRATION = "registration"
    SEARCH = "search"
    PRINTING = "printing"
    REPORTS = "reports"
    USERS = "users"


class Action(str, Enum):
    REGISTER_PERMIT = "register_permit"
    DELETE_PERMIT = "delete_permit"
    MANAGE_USERS = "manage_users"
    DELETE_USER = "delete_user"
    EXPORT_REPORT = "export_report"
    VIEW_EXPIRY_WATCH = "view_expiry_watch"


_ALL = frozenset(UserRole)
_ADMIN = frozenset({UserRole.ADMIN})

VIEW_ACCESS: Dict[View, FrozenSet[UserRole]] = {
    View.DASHBOARD: _ALL,
    View.REGISTRATION: frozenset({UserRole.ADMIN, UserRole.CLERK}),
    View.SEARCH: _ALL,
    View.PRINTING: frozenset({UserRole.ADMIN, UserRole.CLERK}),
    View.REPORTS: frozenset({UserRole.ADMIN, UserRole.VIEWER}),
    View.USERS: _ADMIN,
}

ACTION_ACCESS: Dict[Action, FrozenSet[UserRole]] = {
    Action.REGISTER_PERMIT: VIEW_ACCESS[View.REGISTRATION],
    Action.DELETE_PERMIT: _ADMIN,
    Action.MANAGE_USERS: _ADMIN,
    Action.DELETE_USER: _ADMIN,
    Action.EXPORT_REPORT: VIEW_ACCESS[View.REPORTS],
    Action.VIEW_EXPIRY_WATCH: frozenset({UserRole.ADMIN, UserRole.CLERK}),
}

# Sidebar order and labels
VIEW_LABELS: Dict[View, str] = {
    View.DASHBOARD: "Dashboard",
    View.REGISTRATION: "Registration",
    View.SEARCH: "Search & Verify",
    View.PRINTING: "Print Permits",
    View.REPORTS: "Reports",
    View.USERS: "User Management",
}

DEFAULT_VIEW = View.DASHBOARD

RoleLike = Union[UserRole, str]
ViewLike = Union[View, str]


@dataclass(frozen=True)
class NavigationDecision:
    view: View
    allowed: bool


def _coerce_role(role: RoleLike):
    try:
        return UserRole(role)
    except ValueError:
        return None


def _coerce_view(view: ViewLike):
    try:
        return View(view)
    except ValueError:
        return None


def can_access(role: RoleLike, view: ViewLike) -> bool:
    """True if the role may reach the view; unknown roles and views are denied"""
    role, view = _coerce_role(role), _coerce_view(view)
    if role is None or view is None:
        return False
    return role in VIEW_ACCESS[view]


def can_perform(role: RoleLike, action: Union[Action, str]) -> bool:
    role = _coerce_role(role)
    try:
        action = Action(action)
    except ValueError:
        return False
    if role is None:
        return False
    return role in ACTION_ACCESS[action]


def ensure_action(role: RoleLike, action: Action):
    """Raise AuthorizationDenial unless the role may perform the action"""
    if not can_perform(role, action):
        raise AuthorizationDenial()


def visible_views(role: RoleLike) -> List[View]:
    """Views to offer in the sidebar, in display order"""
    return [view for view in VIEW_LABELS if can_access(role, view)]


def navigate(role: RoleLike, requested: ViewLike) -> NavigationDecision:
    """
    Resolve a navigation request.

    Unknown view names fall back to the dashboard. A known but disallowed view
    is returned with allowed=False so the page renders the access-denied panel.
    """
    view = _coerce_view(requested) or DEFAULT_VIEW
    return NavigationDecision(view=view, allowed=can_access(role, view))
