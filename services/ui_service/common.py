"""
Shared page components: notifications, panels, status badges and the
two-step deletion dialog.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.models import UserSession
from services.registry_service.errors import AuthorizationDenial, RegistryError, SyncFailure
from services.registry_service.models import PermitStatus
from utils.logging_config import get_logger

logger = get_logger(__name__)

STATUS_COLORS = {
    PermitStatus.ACTIVE: "#059669",
    PermitStatus.EXPIRED: "#d97706",
    PermitStatus.REVOKED: "#dc2626",
}


def notify_user(message: str):
    """Toast now and keep the message for the page rendered after st.rerun()"""
    st.toast(message)
    st.session_state["flash_message"] = message


def render_flash_message():
    message = st.session_state.get("flash_message")
    if message:
        st.success(message)
        del st.session_state["flash_message"]


def render_access_denied():
    st.markdown("""
    <div style="text-align: center; padding: 3rem 1rem;">
        <h3>Security Restriction</h3>
        <p>%s</p>
    </div>
    """ % AuthorizationDenial.default_message, unsafe_allow_html=True)


def render_sync_failure(context: AppContext):
    """Blocking banner shown when the registry could not be loaded; Retry resyncs and reruns"""
    st.error("**Cloud Sync Failed**")
    st.write(context.session_store.sync_error or SyncFailure.default_message)
    if st.button("Retry", type="primary"):
        try:
            context.session_store.resync()
        except SyncFailure as e:
            context.error_tracker.track_error(e, "registry_resync_retry")
            return
        st.rerun()


def show_registry_error(context: AppContext, error: RegistryError, operation: str):
    """Surface a failed operation inline; sync failures are also tracked"""
    if isinstance(error, SyncFailure):
        context.error_tracker.track_error(error, operation)
    st.error(error.message)


def status_badge(status: PermitStatus) -> str:
    color = STATUS_COLORS.get(status, "#64748b")
    return (f'<span style="background:{color};color:#fff;padding:2px 10px;'
            f'border-radius:999px;font-size:0.7rem;font-weight:700;">{status.value}</span>')


def render_delete_confirmation(context: AppContext, session: UserSession, key: str):
    """
    Second step of a deletion held in st.session_state.pending_deletion.

    Args:
        context: Application context
        session: Signed-in user performing the deletion
        key: Widget key prefix, unique per page
    """
    pending = st.session_state.get("pending_deletion")
    if pending is None:
        return

    with st.container(border=True):
        st.warning(f"Permanently delete **{pending.label}** ({pending.detail}) from the registry.")

        acknowledged = st.checkbox("I confirm this deletion is explicit", key=f"{key}_ack")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Cancel", key=f"{key}_cancel", use_container_width=True):
                del st.session_state["pending_deletion"]
                st.rerun()
        with col2:
            confirm_clicked = st.button("Confirm Delete", key=f"{key}_confirm", type="primary",
                                        disabled=not acknowledged, use_container_width=True)

        if confirm_clicked and acknowledged:
            pending.acknowledged = True
            try:
                removed = context.orchestrator.confirm_deletion(session, pending)
            except RegistryError as e:
                show_registry_error(context, e, "confirm_deletion")
                return
            del st.session_state["pending_deletion"]
            if removed:
                st.rerun()
