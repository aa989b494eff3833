"""
Reports - filter the registry and export the result as CSV or a printable report.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.authorization import Action, can_perform
from services.auth_service.models import UserSession
from services.registry_service.errors import RegistryError
from services.registry_service.exports import (
    CSV_MODE,
    PDF_MODE,
    build_report_csv,
    build_report_html,
    export_success_message,
    report_filename,
    report_row,
    REPORT_HEADERS,
)
from services.registry_service.models import ALL_STATUSES, PermitStatus, ReportFilter
from services.registry_service.projections import filter_report
from services.ui_service.common import render_delete_confirmation, show_registry_error
from utils.logging_config import get_logger, log_user_interaction

logger = get_logger(__name__)


def render_reports(context: AppContext, session: UserSession):
    st.title("Reports")
    st.caption("Filter the registry and export compliance reports")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        status = st.selectbox("Status", [ALL_STATUSES] + [s.value for s in PermitStatus])
    with col2:
        date_from = st.date_input("Issued from", value=None)
    with col3:
        date_to = st.date_input("Issued to", value=None)
    with col4:
        route = st.text_input("Route contains")

    report_filter = ReportFilter(status=status, date_from=date_from, date_to=date_to, route=route)
    rows = filter_report(context.session_store.permits, report_filter)

    st.caption(f"{len(rows)} records match")
    st.dataframe(
        [dict(zip(REPORT_HEADERS, report_row(p))) for p in rows],
        use_container_width=True,
        hide_index=True
    )

    if can_perform(session.role, Action.EXPORT_REPORT):
        _render_export(context, session, rows)

    if can_perform(session.role, Action.DELETE_PERMIT) and rows:
        _render_delete(context, session, rows)


def _render_export(context: AppContext, session: UserSession, rows):
    today = context.today()
    prefix = context.config.registry.report_filename_prefix

    mode = st.radio("Export format", [CSV_MODE, PDF_MODE], horizontal=True, key="report_mode")
    if mode == CSV_MODE:
        data = build_report_csv(rows)
        file_name = report_filename(today, prefix, "csv")
        mime = "text/csv"
    else:
        data = build_report_html(rows, today, context.config.ui.authority_name)
        file_name = report_filename(today, prefix, "html")
        mime = "text/html"

    if st.download_button(f"Export {mode}", data=data, file_name=file_name, mime=mime, type="primary"):
        log_user_interaction(logger, "export", username=session.username, mode=mode, records=len(rows))
        context.orchestrator.notify(export_success_message(mode, len(rows)))


def _render_delete(context: AppContext, session: UserSession, rows):
    with st.expander("Remove a permit"):
        by_id = {p.id: p for p in rows}
        selected_id = st.selectbox(
            "Permit",
            list(by_id),
            format_func=lambda permit_id: f"{by_id[permit_id].permit_number} · {by_id[permit_id].vehicle_reg}",
            key="report_delete_choice"
        )
        if st.session_state.get("pending_deletion") is None:
            if st.button("Delete Permit", key="report_delete"):
                permit = by_id[selected_id]
                try:
                    st.session_state["pending_deletion"] = context.orchestrator.select_permit_for_deletion(
                        session, permit,
                        success_message=f"Permit {permit.permit_number} has been permanently removed."
                    )
                except RegistryError as e:
                    show_registry_error(context, e, "select_permit_for_deletion")
                    return
                st.rerun()
        render_delete_confirmation(context, session, "reports")
