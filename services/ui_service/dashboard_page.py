"""
Dashboard - registry stats, compliance chart, expiry watch and live feed.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.authorization import Action, can_perform
from services.auth_service.models import UserSession
from services.registry_service.projections import (
    compute_stats,
    days_until_expiry,
    nearing_expiry,
    recent_permits,
    status_distribution,
)
from services.ui_service.common import status_badge


def expiry_banner_text(count: int, window_days: int) -> str:
    noun = "Permit is" if count == 1 else "Permits are"
    return f"{count} {noun} nearing threshold expiry within {window_days} days."


def render_dashboard(context: AppContext, session: UserSession):
    registry = context.config.registry
    permits = context.session_store.permits
    today = context.today()

    st.title("Dashboard")
    st.caption(f"Welcome back, {session.name}")

    stats = compute_stats(permits)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Registry", stats.total)
    col2.metric("Active Permits", stats.active)
    col3.metric("Expired Records", stats.expired)
    col4.metric("Revoked Permits", stats.revoked)

    show_watch = can_perform(session.role, Action.VIEW_EXPIRY_WATCH)
    watch = nearing_expiry(permits, today, registry.expiry_window_days) if show_watch else []

    if watch:
        plates = ", ".join(p.vehicle_reg for p in watch[:3])
        extra = f" +{len(watch) - 3} MORE" if len(watch) > 3 else ""
        st.warning(f"**{expiry_banner_text(len(watch), registry.expiry_window_days)}**  \n{plates}{extra}")

    chart_col, watch_col = st.columns([3, 2])

    with chart_col:
        st.subheader("Compliance Overview")
        st.vega_lite_chart(spec={
            "data": {"values": status_distribution(stats)},
            "mark": {"type": "bar", "cornerRadiusEnd": 4},
            "encoding": {
                "x": {"field": "name", "type": "nominal", "sort": None, "title": None},
                "y": {"field": "value", "type": "quantitative", "title": None},
                "color": {"field": "color", "type": "nominal", "scale": None, "legend": None},
            },
        }, use_container_width=True)

    with watch_col:
        if show_watch:
            st.subheader("Critical Expiry Watch")
            if not watch:
                st.caption("No active permits expire in the watch window.")
            for permit in watch:
                days = days_until_expiry(permit, today)
                st.markdown(f"**{permit.vehicle_reg}** · {permit.operator_name}  \n"
                            f"{permit.expiry_date} · {days} days remaining")

    st.subheader("Live Registry Feed")
    feed = recent_permits(permits, registry.recent_feed_size)
    if not feed:
        st.info("No permits registered yet.")
    for permit in feed:
        st.markdown(
            f"`{permit.permit_number}` &nbsp; **{permit.vehicle_reg}** &nbsp; {permit.operator_name} "
            f"&nbsp; {status_badge(permit.status)}",
            unsafe_allow_html=True
        )
