"""
Permit registry data models.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class PermitStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


ALL_STATUSES = "ALL"


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date (or the date part of an ISO timestamp); None if unparseable"""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing Z"""
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Permit:
    """A vehicle operating permit, keyed exactly like the `permits` collection"""
    id: str
    permit_number: str
    operator_name: str
    company_id: str
    vehicle_reg: str
    route: str
    issue_date: str
    expiry_date: str
    status: PermitStatus
    created_at: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Permit':
        """Build a permit from a store record; raises KeyError/ValueError on malformed data"""
        return cls(
            id=str(record["id"]),
            permit_number=record["permitNumber"],
            operator_name=record["operatorName"],
            company_id=record.get("companyId") or "",
            vehicle_reg=record["vehicleReg"],
            route=record.get("route") or "",
            issue_date=record["issueDate"],
            expiry_date=record["expiryDate"],
            status=PermitStatus(record["status"]),
            created_at=record["createdAt"]
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "permitNumber": self.permit_number,
            "operatorName": self.operator_name,
            "companyId": self.company_id,
            "vehicleReg": self.vehicle_reg,
            "route": self.route,
            "issueDate": self.issue_date,
            "expiryDate": self.expiry_date,
            "status": self.status.value,
            "createdAt": self.created_at,
        }

    @property
    def expiry(self) -> Optional[date]:
        return parse_date(self.expiry_date)

    @property
    def issued(self) -> Optional[date]:
        return parse_date(self.issue_date)

    @property
    def created(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)

    @property
    def is_active(self) -> bool:
        return self.status == PermitStatus.ACTIVE


@dataclass
class PermitRegistration:
    """Form data submitted from the registration page"""
    operator_name: str
    vehicle_reg: str
    expiry_date: str
    company_id: str = ""
    route: str = ""


@dataclass(frozen=True)
class Stats:
    total: int = 0
    active: int = 0
    expired: int = 0
    revoked: int = 0


@dataclass
class ReportFilter:
    """Report page filters; unset bounds and blank route are skipped"""
    status: str = ALL_STATUSES
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    route: str = ""
