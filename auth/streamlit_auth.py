"""
Streamlit authentication components and session management
"""

import streamlit as st
from typing import Optional, Callable
from datetime import datetime

from services.app_context import AppContext
from services.auth_service.models import User, UserRole, UserSession
from services.registry_service.errors import AuthFailure
from utils.logging_config import get_logger, log_user_interaction


# Per-session keys cleared on logout
SESSION_KEYS = ["user_session", "active_view", "pending_deletion", "editing_user_id", "report_mode"]


class StreamlitAuth:
    """
    Streamlit authentication handler
    """

    def __init__(self, context: AppContext):
        self.context = context
        self.authenticator = context.authenticator
        self.config = context.config
        self.logger = get_logger(__name__)

    def require_authentication(self, page_func: Callable):
        """
        Run page_func for a signed-in user, otherwise show the login form

        Args:
            page_func: Function to call if authenticated
        """
        # Authentication disabled (local development): act as the default admin
        if not self.config.auth.enabled and self.get_current_session() is None:
            admin = self.authenticator.find_user(self.config.auth.default_admin_username)
            if admin is not None:
                self._store_session(UserSession.for_user(admin))

        if self.get_current_session():
            return page_func()
        return self.render_login_form()

    def get_current_session(self) -> Optional[UserSession]:
        """
        Get current user session from Streamlit session state

        Returns:
            UserSession if valid, None otherwise
        """
        session_data = st.session_state.get("user_session")
        if not session_data:
            return None

        try:
            session = UserSession(
                user_id=session_data["user_id"],
                username=session_data["username"],
                name=session_data["name"],
                role=UserRole(session_data["role"]),
                signed_in_at=datetime.fromisoformat(session_data["signed_in_at"])
            )
        except (KeyError, ValueError) as e:
            self.logger.warning(f"Discarding malformed session state: {e}")
            self.clear_session()
            return None

        # An account removed from the registry loses its session on the next rerun
        if self.context.session_store.is_ready:
            known_ids = {user.id for user in self.context.session_store.users}
            if session.user_id not in known_ids:
                self.logger.info(f"Session ended for removed account: {session.username}")
                self.clear_session()
                return None

        return session

    def login(self, username: str, password: str) -> bool:
        """
        Authenticate user and create session

        Args:
            username: Username as typed
            password: Password as typed

        Returns:
            True if successful, False otherwise
        """
        try:
            user = self.authenticator.login(username, password)
        except AuthFailure:
            log_user_interaction(self.logger, "login_failed", username=(username or "").strip())
            return False

        self._store_session(UserSession.for_user(user))
        log_user_interaction(self.logger, "login", username=user.username, role=user.role.value)
        return True

    def logout(self):
        """Logout current user"""
        session = self.get_current_session()
        self.clear_session()
        if session:
            log_user_interaction(self.logger, "logout", username=session.username)

    def clear_session(self):
        """Clear session data from Streamlit session state"""
        for key in SESSION_KEYS:
            if key in st.session_state:
                del st.session_state[key]

    def _store_session(self, session: UserSession):
        st.session_state.user_session = {
            "user_id": session.user_id,
            "username": session.username,
            "name": session.name,
            "role": session.role.value,
            "signed_in_at": session.signed_in_at.isoformat()
        }

    def render_login_form(self):
        """Render the staff sign-in form"""
        ui = self.config.ui

        st.markdown(f"""
        <div style="text-align: center; margin-bottom: 2rem;">
            <h2>{ui.page_icon} {ui.authority_name}</h2>
            <p>{ui.system_name}</p>
        </div>
        """, unsafe_allow_html=True)

        with st.form("login_form"):
            st.subheader("Staff Sign In")

            username = st.text_input("Staff ID", placeholder="Enter your username")
            password = st.text_input("Security PIN", type="password", placeholder="Enter your password")

            login_clicked = st.form_submit_button("Authenticate", type="primary", use_container_width=True)

            if login_clicked:
                with st.spinner("Verifying credentials..."):
                    if self.login(username, password):
                        st.rerun()
                    else:
                        st.error(AuthFailure.default_message)

        if self.config.auth.show_support_credentials:
            st.caption(
                f"Support: default administrator is "
                f"`{self.config.auth.default_admin_username}` / `{self.config.auth.default_admin_password}`"
            )

    def render_user_menu(self):
        """Render the signed-in user and logout button in the sidebar"""
        session = self.get_current_session()
        if not session:
            return

        with st.sidebar:
            st.divider()
            initial = User(id=session.user_id, username=session.username,
                           role=session.role, name=session.name).initial
            st.markdown(f"**{initial}** &nbsp; {session.name}")
            st.caption(f"{session.role.value} ACCESS")

            if st.button("Logout", use_container_width=True):
                self.logout()
                st.rerun()


def get_auth(context: AppContext) -> StreamlitAuth:
    """Get the authentication handler for this browser session"""
    if "streamlit_auth" not in st.session_state:
        st.session_state.streamlit_auth = StreamlitAuth(context)
    return st.session_state.streamlit_auth
