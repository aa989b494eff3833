"""
Application context - owns the registry objects for one browser session and is
passed by reference to every page.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from config.app_config import AppConfig, get_config
from infrastructure.store import RecordStore, create_record_store
from services.auth_service.authenticator import Authenticator
from services.registry_service.mutations import MutationOrchestrator
from services.registry_service.session_store import SessionStore
from utils.logging_config import ErrorTracker, get_error_tracker, get_logger

logger = get_logger(__name__)


@dataclass
class AppContext:
    config: AppConfig
    record_store: RecordStore
    session_store: SessionStore
    authenticator: Authenticator
    orchestrator: MutationOrchestrator
    error_tracker: ErrorTracker

    def today(self) -> date:
        return self.orchestrator.today()


def build_app_context(config: Optional[AppConfig] = None,
                      notify: Optional[Callable[[str], None]] = None,
                      record_store: Optional[RecordStore] = None) -> AppContext:
    """
    Wire the store, session cache, authenticator and orchestrator together.

    Args:
        config: Application configuration (global config if omitted)
        notify: Callback for success notifications, e.g. st.toast
        record_store: Store to use instead of the configured backend

    Returns:
        A context whose Session Store has not been synchronized yet
    """
    config = config or get_config()
    record_store = record_store or create_record_store(config.store)
    session_store = SessionStore(record_store, auth_config=config.auth)

    orchestrator_kwargs = {"permit_prefix": config.registry.permit_prefix}
    if notify is not None:
        orchestrator_kwargs["notify"] = notify

    context = AppContext(
        config=config,
        record_store=record_store,
        session_store=session_store,
        authenticator=Authenticator(session_store, config.auth.login_delay_seconds),
        orchestrator=MutationOrchestrator(record_store, session_store, **orchestrator_kwargs),
        error_tracker=get_error_tracker()
    )
    logger.info(f"Application context created with {config.store.backend} backend")
    return context
