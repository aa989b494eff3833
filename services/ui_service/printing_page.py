"""
Print Permits - detail panel and security disc preview for active permits.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.models import UserSession
from services.registry_service.printing import DiscRecord, permit_detail_rows, render_disc_html
from services.registry_service.projections import printable_permits
from utils.logging_config import get_logger, log_user_interaction

logger = get_logger(__name__)


def render_printing(context: AppContext, session: UserSession):
    st.title("Print Permits")
    st.caption("Only active permits are issued security discs")

    permits = printable_permits(context.session_store.permits)
    if not permits:
        st.info("No active permits available for printing.")
        return

    by_id = {p.id: p for p in permits}
    selected_id = st.selectbox(
        "Select permit",
        list(by_id),
        format_func=lambda permit_id: f"{by_id[permit_id].permit_number} · {by_id[permit_id].vehicle_reg}"
    )
    permit = by_id[selected_id]

    detail_col, disc_col = st.columns([1, 1])

    with detail_col:
        st.subheader("Permit Details")
        for label, value in permit_detail_rows(permit):
            st.markdown(f"**{label}**  \n{value}")

    with disc_col:
        st.subheader("Security Disc")
        disc_html = render_disc_html(DiscRecord.from_permit(permit), context.config.ui.authority_name)
        st.markdown(disc_html, unsafe_allow_html=True)

        if st.download_button("Download Disc", data=disc_html,
                              file_name=f"{permit.permit_number}_disc.html",
                              mime="text/html", use_container_width=True):
            log_user_interaction(logger, "print_disc", username=session.username,
                                 permit_number=permit.permit_number)
