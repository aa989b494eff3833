"""
Mutation Orchestrator - every write to the registry goes through here.

Each operation is: local validation, one remote call, then a full resync of
the Session Store. Validation failures never reach the store, and a failed
remote call leaves the cache exactly as it was.
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union

from infrastructure.store import RecordStore, RecordStoreError, PERMITS, USERS
from services.auth_service.authorization import Action, ensure_action
from services.auth_service.models import User, UserDraft, UserRole, UserSession
from services.registry_service.errors import SyncFailure, ValidationFailure
from services.registry_service.models import Permit, PermitRegistration, PermitStatus
from services.registry_service.projections import has_active_duplicate, next_permit_number
from services.registry_service.session_store import SessionStore
from utils.logging_config import get_logger, log_registry_event

Actor = Union[User, UserSession]


@dataclass
class PendingDeletion:
    """
    First step of a deletion. Nothing is removed until `acknowledged` is set
    and the deletion is confirmed.
    """
    collection: str
    record_id: str
    label: str
    detail: str = ""
    success_message: Optional[str] = None
    acknowledged: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _log_notification(message: str):
    get_logger(__name__).info(f"Notification: {message}")


def _parse_role(role) -> UserRole:
    try:
        return UserRole(role)
    except ValueError:
        raise ValidationFailure("Unknown role.")


class MutationOrchestrator:
    """
    Sequences create, update and delete calls against the record store.
    """

    def __init__(self, record_store: RecordStore, session_store: SessionStore,
                 notify: Callable[[str], None] = _log_notification,
                 clock: Callable[[], datetime] = _utc_now,
                 permit_prefix: str = "PTA"):
        self.logger = get_logger(__name__)
        self.record_store = record_store
        self.session_store = session_store
        self.notify = notify
        self.clock = clock
        self.permit_prefix = permit_prefix

    # Permits

    def register_permit(self, actor: Actor, registration: PermitRegistration) -> Permit:
        """
        Validate and submit a new permit.

        Raises:
            AuthorizationDenial: actor may not register permits
            ValidationFailure: missing field, bad date or duplicate active plate
            SyncFailure: the store rejected the insert or the resync failed
        """
        ensure_action(actor.role, Action.REGISTER_PERMIT)

        operator_name = (registration.operator_name or "").strip()
        vehicle_reg = (registration.vehicle_reg or "").strip().upper()
        expiry_text = (registration.expiry_date or "").strip()

        if not operator_name or not vehicle_reg or not expiry_text:
            raise ValidationFailure("Please fill in all required fields.")

        try:
            expiry = date.fromisoformat(expiry_text)
        except ValueError:
            raise ValidationFailure("Permit expiry must be a valid date (YYYY-MM-DD).")

        permits = self.session_store.permits
        if has_active_duplicate(permits, vehicle_reg):
            raise ValidationFailure("This vehicle registration already has an active permit.")

        now = self.clock()
        permit = Permit(
            id=str(uuid.uuid4()),
            permit_number=next_permit_number(permits, now.year, self.permit_prefix),
            operator_name=operator_name,
            company_id=(registration.company_id or "").strip(),
            vehicle_reg=vehicle_reg,
            route=(registration.route or "").strip(),
            issue_date=now.date().isoformat(),
            expiry_date=expiry.isoformat(),
            status=PermitStatus.ACTIVE,
            created_at=now.isoformat()
        )

        self._write(lambda: self.record_store.insert(PERMITS, [permit.to_record()]),
                    "Failed to sync with the registry. Verify connection.")
        log_registry_event(self.logger, "permit_registered", permit.id,
                           permit_number=permit.permit_number, actor=actor.username)

        self.session_store.resync()
        self.notify("Permit synchronized with Cloud Registry successfully.")
        return permit

    def select_permit_for_deletion(self, actor: Actor, permit: Permit,
                                   success_message: Optional[str] = None) -> PendingDeletion:
        ensure_action(actor.role, Action.DELETE_PERMIT)
        return PendingDeletion(
            collection=PERMITS,
            record_id=permit.id,
            label=permit.permit_number,
            detail=permit.vehicle_reg,
            success_message=success_message
        )

    # Users

    def create_user(self, actor: Actor, draft: UserDraft) -> User:
        ensure_action(actor.role, Action.MANAGE_USERS)

        name = (draft.name or "").strip()
        username = (draft.username or "").strip()
        if not username or not draft.password or not name:
            raise ValidationFailure("Name, username and password are all required.")
        role = _parse_role(draft.role)

        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password=draft.password,
            role=role,
            name=name
        )

        self._write(lambda: self.record_store.insert(USERS, [user.to_record()]),
                    "Failed to create user in database.")
        log_registry_event(self.logger, "user_created", user.id,
                           username=user.username, role=user.role.value, actor=actor.username)

        self.session_store.resync()
        self.notify(f"Account provisioned for {user.name}")
        return user

    def update_user(self, actor: Actor, user_id: str, draft: UserDraft) -> None:
        """Resubmit name, username and role; the password only when one was entered"""
        ensure_action(actor.role, Action.MANAGE_USERS)

        name = (draft.name or "").strip()
        username = (draft.username or "").strip()
        if not username or not name:
            raise ValidationFailure("Name and username are required.")
        role = _parse_role(draft.role)

        fields = {
            "name": name,
            "username": username,
            "role": role.value,
        }
        if draft.password:
            fields["password"] = draft.password

        self._write(lambda: self.record_store.update(USERS, user_id, fields),
                    "Failed to update cloud record.")
        log_registry_event(self.logger, "user_updated", user_id,
                           password_changed="password" in fields, actor=actor.username)

        self.session_store.resync()
        self.notify(f"Updated profile for {name}")

    def select_user_for_deletion(self, actor: Actor, user: User) -> PendingDeletion:
        ensure_action(actor.role, Action.DELETE_USER)
        return PendingDeletion(collection=USERS, record_id=user.id, label=user.name, detail=user.username)

    # Deletion

    def confirm_deletion(self, actor: Actor, pending: Optional[PendingDeletion]) -> bool:
        """
        Second step of a deletion.

        Returns False without touching the store unless the pending deletion
        has been acknowledged. Otherwise issues one delete and one resync.
        """
        if pending is None or not pending.acknowledged:
            self.logger.debug("Deletion not acknowledged, nothing removed")
            return False

        action = Action.DELETE_PERMIT if pending.collection == PERMITS else Action.DELETE_USER
        ensure_action(actor.role, action)

        failure = ("Failed to delete cloud record." if pending.collection == USERS
                   else "Failed to remove permit from the registry.")
        self._write(lambda: self.record_store.delete(pending.collection, pending.record_id), failure)
        log_registry_event(self.logger, f"{pending.collection[:-1]}_deleted", pending.record_id,
                           label=pending.label, actor=actor.username)

        self.session_store.resync()
        if pending.success_message:
            self.notify(pending.success_message)
        elif pending.collection == PERMITS:
            self.notify(f"Record {pending.label} has been purged.")
        else:
            self.notify("User account permanently revoked.")
        return True

    def _write(self, call: Callable[[], None], failure_message: str):
        try:
            call()
        except RecordStoreError as e:
            self.logger.error(f"{failure_message} ({e})")
            raise SyncFailure(failure_message) from e

    def today(self) -> date:
        return self.clock().date()
