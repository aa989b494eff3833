"""
Shared fixtures: an in-memory recording record store and pre-wired registry services
"""

import copy
from datetime import datetime, timezone

import pytest

from config.app_config import AuthConfig
from infrastructure.store import RecordStore, RecordStoreError, PERMITS, USERS
from services.auth_service.authenticator import Authenticator
from services.auth_service.models import UserRole, UserSession
from services.registry_service.mutations import MutationOrchestrator
from services.registry_service.session_store import SessionStore


FIXED_NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


class RecordingStore(RecordStore):
    """In-memory record store that counts every call and can fail on demand"""

    def __init__(self, permits=None, users=None):
        self.data = {
            PERMITS: [dict(r) for r in (permits or [])],
            USERS: [dict(r) for r in (users or [])],
        }
        self.calls = []
        self.fail_on = set()

    def count(self, method, collection=None):
        return sum(1 for m, c in self.calls if m == method and (collection is None or c == collection))

    def _record(self, method, collection):
        self._check_collection(collection)
        self.calls.append((method, collection))
        if method in self.fail_on:
            raise RecordStoreError(f"{method} failed", collection=collection)

    def select(self, collection, order_by=None, descending=False):
        self._record("select", collection)
        rows = copy.deepcopy(self.data[collection])
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or "", reverse=descending)
        return rows

    def insert(self, collection, records):
        self._record("insert", collection)
        self.data[collection].extend(dict(r) for r in records)

    def update(self, collection, record_id, fields):
        self._record("update", collection)
        for row in self.data[collection]:
            if row["id"] == record_id:
                row.update(fields)

    def delete(self, collection, record_id):
        self._record("delete", collection)
        self.data[collection] = [r for r in self.data[collection] if r["id"] != record_id]


def permit_record(number=1, reg="ABC123", status="ACTIVE", expiry="2024-12-31",
                  issued="2024-01-15", operator="Metro Cabs", route="", company="",
                  created=None, record_id=None):
    return {
        "id": record_id or f"permit-{number}",
        "permitNumber": f"PTA-2024-{number:04d}",
        "operatorName": operator,
        "companyId": company,
        "vehicleReg": reg,
        "route": route,
        "issueDate": issued,
        "expiryDate": expiry,
        "status": status,
        "createdAt": created or f"2024-01-{number:02d}T08:00:00+00:00",
    }


def user_record(user_id="user-admin", username="admin", password="pta123", role="ADMIN", name="Arthur Admin"):
    return {"id": user_id, "username": username, "password": password, "role": role, "name": name}


STAFF = [
    user_record(),
    user_record("user-clerk", "clerk", "desk", "CLERK", "Cara Clerk"),
    user_record("user-viewer", "viewer", "look", "VIEWER", "Vic Viewer"),
]


@pytest.fixture
def record_store():
    return RecordingStore(users=STAFF)


@pytest.fixture
def session_store(record_store):
    store = SessionStore(record_store, auth_config=AuthConfig())
    store.resync()
    record_store.calls.clear()
    return store


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def orchestrator(record_store, session_store, notifications):
    return MutationOrchestrator(record_store, session_store, notify=notifications.append,
                                clock=lambda: FIXED_NOW)


@pytest.fixture
def authenticator(session_store):
    return Authenticator(session_store, login_delay_seconds=0)


@pytest.fixture
def admin():
    return UserSession(user_id="user-admin", username="admin", name="Arthur Admin", role=UserRole.ADMIN)


@pytest.fixture
def clerk():
    return UserSession(user_id="user-clerk", username="clerk", name="Cara Clerk", role=UserRole.CLERK)


@pytest.fixture
def viewer():
    return UserSession(user_id="user-viewer", username="viewer", name="Vic Viewer", role=UserRole.VIEWER)
