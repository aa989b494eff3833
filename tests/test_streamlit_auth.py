"""
Tests for the Streamlit authentication handler and application context
"""

import pytest
from unittest.mock import MagicMock, patch

from conftest import RecordingStore, STAFF
from config.app_config import AppConfig
from services.app_context import build_app_context
from services.auth_service.models import UserRole


class MockSessionState:
    """Mock Streamlit session state for testing"""

    def __init__(self):
        object.__setattr__(self, "data", {})

    def __contains__(self, key):
        return key in self.data

    def __getitem__(self, key):
        return self.data[key]

    def __setitem__(self, key, value):
        self.data[key] = value

    def __delitem__(self, key):
        del self.data[key]

    def __getattr__(self, key):
        try:
            return self.data[key]
        except KeyError:
            raise AttributeError(key)

    def __setattr__(self, key, value):
        self.data[key] = value

    def get(self, key, default=None):
        return self.data.get(key, default)


@pytest.fixture
def context():
    config = AppConfig()
    config.auth.login_delay_seconds = 0
    backend = RecordingStore(users=STAFF)
    context = build_app_context(config, notify=lambda message: None, record_store=backend)
    context.session_store.resync()
    return context


@pytest.fixture
def mock_st():
    mock = MagicMock()
    mock.session_state = MockSessionState()
    with patch("auth.streamlit_auth.st", mock):
        yield mock


@pytest.fixture
def auth(context, mock_st):
    from auth.streamlit_auth import StreamlitAuth
    return StreamlitAuth(context)


class TestStreamlitAuth:
    """Test sign-in, session restore and sign-out"""

    def test_no_session_initially(self, auth):
        assert auth.get_current_session() is None

    def test_login_stores_session(self, auth, mock_st):
        assert auth.login(" Clerk ", "desk") is True

        session = auth.get_current_session()
        assert session.user_id == "user-clerk"
        assert session.role == UserRole.CLERK
        assert mock_st.session_state["user_session"]["name"] == "Cara Clerk"

    def test_failed_login(self, auth, mock_st):
        assert auth.login("admin", "wrong") is False
        assert "user_session" not in mock_st.session_state

    def test_logout_clears_session_keys(self, auth, mock_st):
        auth.login("admin", "pta123")
        mock_st.session_state["active_view"] = "users"
        mock_st.session_state["flash_message"] = "kept"

        auth.logout()

        assert auth.get_current_session() is None
        assert "active_view" not in mock_st.session_state
        assert "flash_message" in mock_st.session_state

    def test_session_for_removed_account_is_dropped(self, auth, context, mock_st):
        auth.login("viewer", "look")
        context.record_store.delete("users", "user-viewer")
        context.session_store.resync()

        assert auth.get_current_session() is None
        assert "user_session" not in mock_st.session_state

    def test_malformed_session_is_dropped(self, auth, mock_st):
        mock_st.session_state["user_session"] = {"user_id": "user-admin", "role": "ROOT"}

        assert auth.get_current_session() is None

    def test_require_authentication_runs_page(self, auth):
        auth.login("admin", "pta123")
        page = MagicMock(return_value="rendered")

        assert auth.require_authentication(page) == "rendered"

    def test_require_authentication_shows_login(self, auth, mock_st):
        page = MagicMock()
        mock_st.form.return_value.__enter__.return_value = None
        mock_st.form_submit_button.return_value = False

        auth.require_authentication(page)

        page.assert_not_called()
        mock_st.form.assert_called_once_with("login_form")

    def test_disabled_auth_signs_in_default_admin(self, auth, context):
        context.config.auth.enabled = False
        page = MagicMock()

        auth.require_authentication(page)

        page.assert_called_once()
        assert auth.get_current_session().username == "admin"


class TestAppContext:
    """Test application context wiring"""

    def test_components_share_one_session_store(self, context):
        assert context.authenticator.session_store is context.session_store
        assert context.orchestrator.session_store is context.session_store
        assert context.orchestrator.record_store is context.record_store

    def test_configured_prefix(self):
        config = AppConfig()
        config.registry.permit_prefix = "TST"

        context = build_app_context(config, record_store=RecordingStore(users=STAFF))

        assert context.orchestrator.permit_prefix == "TST"

    def test_sqlite_backend_from_config(self, tmp_path):
        config = AppConfig()
        config.store.backend = "sqlite"
        config.store.sqlite_path = str(tmp_path / "registry.db")

        context = build_app_context(config)
        context.session_store.resync()

        assert [u.username for u in context.session_store.users] == ["admin"]
