"""
Session Store - the in-memory snapshot of the registry held by one client.
The cache is only ever replaced wholesale by resync(), never patched in place.
"""

import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from config.app_config import AuthConfig
from infrastructure.store import RecordStore, RecordStoreError, PERMITS, USERS
from services.auth_service.models import User, UserRole
from services.registry_service.errors import SyncFailure
from services.registry_service.models import Permit
from utils.logging_config import get_logger, log_execution_time, log_registry_event


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of both collections as of one synchronization"""
    permits: Tuple[Permit, ...] = ()
    users: Tuple[User, ...] = ()
    synced_at: Optional[datetime] = None


EMPTY_SNAPSHOT = RegistrySnapshot()


class SessionStore:
    """
    Holds the full `permits` and `users` collections for the running client.

    Readers take `snapshot` once and work from that object; resync() builds a
    complete new snapshot before swapping the reference, so a reader sees
    either the old state or the new one and never a mix.
    """

    def __init__(self, record_store: RecordStore, auth_config: Optional[AuthConfig] = None):
        self.logger = get_logger(__name__)
        self.record_store = record_store
        self.auth_config = auth_config or AuthConfig()
        self._snapshot = EMPTY_SNAPSHOT
        self._lock = threading.Lock()
        self.sync_error: Optional[str] = None
        self.sync_count = 0

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    @property
    def permits(self) -> Tuple[Permit, ...]:
        return self._snapshot.permits

    @property
    def users(self) -> Tuple[User, ...]:
        return self._snapshot.users

    @property
    def is_ready(self) -> bool:
        """True once at least one synchronization has succeeded"""
        return self._snapshot.synced_at is not None

    @property
    def last_synced_at(self) -> Optional[datetime]:
        return self._snapshot.synced_at

    def resync(self) -> RegistrySnapshot:
        """
        Re-read both collections and replace the cache.

        Raises:
            SyncFailure: if any read (or the default-account seeding) fails.
                The previous snapshot stays in place.
        """
        with self._lock:
            try:
                with log_execution_time(self.logger, "registry_resync"):
                    snapshot = self._fetch()
            except RecordStoreError as e:
                self.sync_error = SyncFailure.default_message
                raise SyncFailure() from e
            except (KeyError, ValueError, TypeError) as e:
                self.logger.error(f"Registry returned malformed records: {e}")
                self.sync_error = "Registry returned malformed records."
                raise SyncFailure(self.sync_error) from e

            self._snapshot = snapshot
            self.sync_error = None
            self.sync_count += 1

        self.logger.debug(
            f"Registry synced: {len(snapshot.permits)} permits, {len(snapshot.users)} users"
        )
        return snapshot

    def _fetch(self) -> RegistrySnapshot:
        permit_records = self.record_store.select(PERMITS, order_by="createdAt", descending=True)
        user_records = self.record_store.select(USERS)

        if not user_records:
            self._seed_default_admin()
            user_records = self.record_store.select(USERS)

        return RegistrySnapshot(
            permits=tuple(Permit.from_record(r) for r in permit_records),
            users=tuple(User.from_record(r) for r in user_records),
            synced_at=datetime.now()
        )

    def _seed_default_admin(self):
        """Bootstrap an empty users collection with the default administrator"""
        admin = User(
            id=str(uuid.uuid4()),
            username=self.auth_config.default_admin_username,
            password=self.auth_config.default_admin_password,
            role=UserRole.ADMIN,
            name=self.auth_config.default_admin_name
        )
        self.record_store.insert(USERS, [admin.to_record()])
        log_registry_event(self.logger, "default_admin_seeded", admin.id, username=admin.username)
