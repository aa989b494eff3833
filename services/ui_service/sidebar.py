"""
Sidebar navigation built from the Authorization Gate.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.authorization import DEFAULT_VIEW, VIEW_LABELS, View, visible_views
from services.auth_service.models import UserSession
from utils.logging_config import get_logger, log_user_interaction

logger = get_logger(__name__)


def render_sidebar(context: AppContext, session: UserSession) -> View:
    """
    Render branding and the navigation menu for the signed-in role.

    Returns:
        The requested view; access is decided by the caller through navigate()
    """
    ui = context.config.ui
    views = visible_views(session.role)
    current = st.session_state.get("active_view", DEFAULT_VIEW.value)

    with st.sidebar:
        st.markdown(f"## {ui.page_icon} {ui.portal_name}")
        st.caption(ui.authority_name)

        options = [view.value for view in views]
        index = options.index(current) if current in options else 0
        selected = st.radio(
            "Navigation",
            options,
            index=index,
            format_func=lambda value: VIEW_LABELS[View(value)],
            label_visibility="collapsed"
        )

        if context.session_store.last_synced_at:
            st.caption(f"Last sync {context.session_store.last_synced_at.strftime('%H:%M:%S')}")

    if selected != current:
        log_user_interaction(logger, "navigate", username=session.username, view=selected)
        st.session_state.pop("pending_deletion", None)
    st.session_state["active_view"] = selected
    return View(selected)
