"""
UI service - Streamlit pages for the permit portal, one per navigable view.
"""

from services.auth_service.authorization import View

from .dashboard_page import render_dashboard
from .registration_page import render_registration
from .search_page import render_search
from .printing_page import render_printing
from .reports_page import render_reports
from .users_page import render_users
from .sidebar import render_sidebar
from .common import notify_user, render_access_denied, render_flash_message, render_sync_failure

PAGES = {
    View.DASHBOARD: render_dashboard,
    View.REGISTRATION: render_registration,
    View.SEARCH: render_search,
    View.PRINTING: render_printing,
    View.REPORTS: render_reports,
    View.USERS: render_users,
}

__all__ = [
    'PAGES',
    'render_sidebar',
    'notify_user',
    'render_access_denied',
    'render_flash_message',
    'render_sync_failure',
]
