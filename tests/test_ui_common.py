"""
Tests for the shared deletion confirmation dialog
"""

import pytest
from unittest.mock import MagicMock, patch

from services.auth_service.models import UserRole, UserSession
from services.registry_service.mutations import PendingDeletion
from services.ui_service.common import render_delete_confirmation


@pytest.fixture
def admin_session():
    return UserSession(user_id="user-admin", username="admin", name="Arthur Admin", role=UserRole.ADMIN)


@pytest.fixture
def context():
    context = MagicMock()
    context.orchestrator.confirm_deletion.return_value = True
    return context


def make_st(checked: bool, confirm_clicked: bool, pending: PendingDeletion) -> MagicMock:
    mock = MagicMock()
    mock.session_state = {"pending_deletion": pending}
    mock.checkbox.return_value = checked
    mock.columns.return_value = (MagicMock(), MagicMock())
    mock.button.side_effect = lambda label, **kwargs: confirm_clicked and label == "Confirm Delete"
    return mock


class TestDeleteConfirmation:
    """Both permit and user deletions need the explicit checkbox"""

    @pytest.mark.parametrize("pending", [
        PendingDeletion(collection="users", record_id="user-clerk", label="Cara Clerk", detail="clerk"),
        PendingDeletion(collection="permits", record_id="permit-1", label="PTA-2024-0001", detail="ABC123"),
    ])
    def test_unchecked_confirmation_never_deletes(self, context, admin_session, pending):
        mock_st = make_st(checked=False, confirm_clicked=True, pending=pending)

        with patch("services.ui_service.common.st", mock_st):
            render_delete_confirmation(context, admin_session, pending.collection)

        mock_st.checkbox.assert_called_once_with("I confirm this deletion is explicit",
                                                 key=f"{pending.collection}_ack")
        context.orchestrator.confirm_deletion.assert_not_called()
        assert mock_st.session_state["pending_deletion"] is pending
        assert pending.acknowledged is False

    def test_confirm_button_disabled_until_checked(self, context, admin_session):
        pending = PendingDeletion(collection="users", record_id="user-clerk", label="Cara Clerk", detail="clerk")
        mock_st = make_st(checked=False, confirm_clicked=False, pending=pending)

        with patch("services.ui_service.common.st", mock_st):
            render_delete_confirmation(context, admin_session, "users")

        confirm_call = [c for c in mock_st.button.call_args_list if c.args[0] == "Confirm Delete"][0]
        assert confirm_call.kwargs["disabled"] is True

    def test_checked_user_deletion_is_confirmed(self, context, admin_session):
        pending = PendingDeletion(collection="users", record_id="user-clerk", label="Cara Clerk", detail="clerk")
        mock_st = make_st(checked=True, confirm_clicked=True, pending=pending)

        with patch("services.ui_service.common.st", mock_st):
            render_delete_confirmation(context, admin_session, "users")

        context.orchestrator.confirm_deletion.assert_called_once_with(admin_session, pending)
        assert pending.acknowledged is True
        assert "pending_deletion" not in mock_st.session_state
        mock_st.rerun.assert_called_once()

    def test_nothing_pending_renders_nothing(self, context, admin_session):
        mock_st = MagicMock()
        mock_st.session_state = {}

        with patch("services.ui_service.common.st", mock_st):
            render_delete_confirmation(context, admin_session, "users")

        mock_st.container.assert_not_called()
