"""
User Management - provision, edit and revoke staff accounts.
"""

import streamlit as st

from services.app_context import AppContext
from services.auth_service.models import UserDraft, UserRole, UserSession
from services.registry_service.errors import RegistryError
from services.ui_service.common import render_delete_confirmation, show_registry_error

ROLE_OPTIONS = [role.value for role in UserRole]


def render_users(context: AppContext, session: UserSession):
    st.title("User Management")
    st.caption("Provision and revoke access for authority staff")

    users = context.session_store.users
    by_id = {u.id: u for u in users}

    for user in users:
        col1, col2, col3, col4 = st.columns([3, 2, 1, 1])
        col1.markdown(f"**{user.name}**  \n`{user.username}`")
        col2.write(user.role.value)
        if col3.button("Edit", key=f"edit_{user.id}"):
            st.session_state["editing_user_id"] = user.id
            st.rerun()
        if col4.button("Revoke", key=f"revoke_{user.id}"):
            try:
                st.session_state["pending_deletion"] = context.orchestrator.select_user_for_deletion(session, user)
            except RegistryError as e:
                show_registry_error(context, e, "select_user_for_deletion")
            else:
                st.rerun()

    render_delete_confirmation(context, session, "users")

    editing = by_id.get(st.session_state.get("editing_user_id"))
    if editing is not None:
        _render_edit_form(context, session, editing)
    else:
        _render_create_form(context, session)


def _render_create_form(context: AppContext, session: UserSession):
    version = st.session_state.get("user_form_version", 0)

    with st.form(f"create_user_form_{version}"):
        st.subheader("Provision New Account")
        name = st.text_input("Full Name")
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        role = st.selectbox("Role", ROLE_OPTIONS, index=ROLE_OPTIONS.index(UserRole.VIEWER.value))
        submitted = st.form_submit_button("Create Account", type="primary", use_container_width=True)

    if not submitted:
        return

    try:
        context.orchestrator.create_user(
            session, UserDraft(name=name, username=username, role=UserRole(role), password=password)
        )
    except RegistryError as e:
        show_registry_error(context, e, "create_user")
        return

    st.session_state["user_form_version"] = version + 1
    st.rerun()


def _render_edit_form(context: AppContext, session: UserSession, user):
    with st.form(f"edit_user_form_{user.id}"):
        st.subheader("Edit Official Profile")
        name = st.text_input("Full Name", value=user.name)
        username = st.text_input("Username", value=user.username)
        password = st.text_input("New Password", type="password", help="Leave blank to keep the current password")
        role = st.selectbox("Role", ROLE_OPTIONS, index=ROLE_OPTIONS.index(user.role.value))

        col1, col2 = st.columns(2)
        with col1:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)
        with col2:
            submitted = st.form_submit_button("Save Changes", type="primary", use_container_width=True)

    if cancelled:
        del st.session_state["editing_user_id"]
        st.rerun()
    if not submitted:
        return

    try:
        context.orchestrator.update_user(
            session, user.id, UserDraft(name=name, username=username, role=UserRole(role), password=password or None)
        )
    except RegistryError as e:
        show_registry_error(context, e, "update_user")
        return

    del st.session_state["editing_user_id"]
    st.rerun()
