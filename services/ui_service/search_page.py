"""
Search & Verify - look up one permit by number, plate or operator name.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.authorization import Action, can_perform
from services.auth_service.models import UserSession
from services.registry_service.errors import RegistryError
from services.registry_service.models import Permit
from services.registry_service.projections import is_expired, search_permit
from services.ui_service.common import render_delete_confirmation, show_registry_error, status_badge
from utils.logging_config import get_logger, log_user_interaction

logger = get_logger(__name__)


def render_search(context: AppContext, session: UserSession):
    st.title("Search & Verify")
    st.caption("Verify a permit by permit number, vehicle plate or operator name")

    query = st.text_input("Search registry", placeholder="PTA-2024-0001, ABC123 or operator name",
                          key="search_query")
    if not query.strip():
        return

    permit = search_permit(context.session_store.permits, query)
    log_user_interaction(logger, "search", username=session.username, found=permit is not None)

    if permit is None:
        st.error("**Unauthorized/Not Found**")
        st.write(f"No record in the registry matches \"{query.strip()}\".")
        return

    _render_permit_card(context, permit)

    if can_perform(session.role, Action.DELETE_PERMIT):
        if st.session_state.get("pending_deletion") is None:
            if st.button("Delete Record", key="search_delete"):
                try:
                    st.session_state["pending_deletion"] = context.orchestrator.select_permit_for_deletion(
                        session, permit)
                except RegistryError as e:
                    show_registry_error(context, e, "select_permit_for_deletion")
                    return
                st.rerun()
        render_delete_confirmation(context, session, "search")


def _render_permit_card(context: AppContext, permit: Permit):
    expired = is_expired(permit, context.today())
    expiry_color = "#dc2626" if expired else "inherit"

    with st.container(border=True):
        st.markdown(f"### {permit.vehicle_reg} &nbsp; {status_badge(permit.status)}", unsafe_allow_html=True)
        col1, col2 = st.columns(2)
        with col1:
            st.markdown(f"**Permit Number**  \n`{permit.permit_number}`")
            st.markdown(f"**Operator**  \n{permit.operator_name}")
            st.markdown(f"**Company ID**  \n{permit.company_id or 'N/A'}")
        with col2:
            st.markdown(f"**Route**  \n{permit.route or 'Global Permission'}")
            st.markdown(f"**Issued**  \n{permit.issue_date}")
            st.markdown(f"**Expiry**  \n<span style=\"color:{expiry_color};font-weight:700;\">"
                        f"{permit.expiry_date}</span>", unsafe_allow_html=True)
