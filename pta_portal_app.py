import streamlit as st

from auth.streamlit_auth import get_auth
from config.app_config import get_config
from services.app_context import AppContext, build_app_context
from services.auth_service.authorization import navigate
from services.registry_service.errors import SyncFailure
from services.ui_service import (
    PAGES,
    notify_user,
    render_access_denied,
    render_flash_message,
    render_sidebar,
    render_sync_failure,
)
from utils.logging_config import initialize_logging, get_logger

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)

# Get configuration
config = get_config()

st.set_page_config(page_title=config.ui.app_title, page_icon=config.ui.page_icon, layout="wide")


def get_app_context() -> AppContext:
    """One application context per browser session, synchronized on first use"""
    if "app_context" not in st.session_state:
        context = build_app_context(config, notify=notify_user)
        st.session_state.app_context = context
        try:
            context.session_store.resync()
            logger.info("Application started")
        except SyncFailure as e:
            error_tracker.track_error(e, "startup_sync")
    return st.session_state.app_context


def main_app():
    """Main application content (protected by authentication)"""
    session = auth.get_current_session()

    requested = render_sidebar(context, session)
    auth.render_user_menu()

    render_flash_message()

    decision = navigate(session.role, requested)
    if not decision.allowed:
        render_access_denied()
        return

    PAGES[decision.view](context, session)


context = get_app_context()

if not context.session_store.is_ready:
    st.title(config.ui.app_title)
    render_sync_failure(context)
else:
    auth = get_auth(context)
    auth.require_authentication(main_app)
