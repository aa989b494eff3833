"""
Registration - issue a new permit.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.models import UserSession
from services.registry_service.errors import RegistryError
from services.registry_service.models import PermitRegistration
from services.registry_service.projections import next_permit_number
from services.ui_service.common import show_registry_error


def render_registration(context: AppContext, session: UserSession):
    st.title("Registration")
    st.caption("Issue a new operating permit to the registry")

    year = context.orchestrator.clock().year
    preview = next_permit_number(context.session_store.permits, year, context.config.registry.permit_prefix)
    st.markdown(f"Next permit reference: `{preview}`")

    # Bumped after a successful submit so the form starts empty
    version = st.session_state.get("registration_form_version", 0)

    with st.form(f"registration_form_{version}"):
        col1, col2 = st.columns(2)
        with col1:
            operator_name = st.text_input("Operator Name *")
            vehicle_reg = st.text_input("Vehicle Plate *")
            expiry = st.date_input("Permit Expiry *", value=None, min_value=context.today())
        with col2:
            company_id = st.text_input("Corporate ID / Reg #")
            route = st.text_input("Operational Route")

        submitted = st.form_submit_button("Register Permit", type="primary", use_container_width=True)

    if not submitted:
        return

    registration = PermitRegistration(
        operator_name=operator_name,
        vehicle_reg=vehicle_reg,
        expiry_date=expiry.isoformat() if expiry else "",
        company_id=company_id,
        route=route
    )
    try:
        with st.spinner("Synchronizing with the registry..."):
            context.orchestrator.register_permit(session, registration)
    except RegistryError as e:
        show_registry_error(context, e, "register_permit")
        return

    st.session_state["registration_form_version"] = version + 1
    st.rerun()
