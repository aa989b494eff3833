"""
View projections - pure derivations over a registry snapshot.

Nothing here mutates state. Every function takes the permits it works on
(normally `SessionStore.permits`, newest first) and, where time matters, an
explicit reference date.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from services.registry_service.models import (
    ALL_STATUSES,
    Permit,
    PermitStatus,
    ReportFilter,
    Stats,
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def compute_stats(permits: Iterable[Permit]) -> Stats:
    """Count permits by status in a single pass"""
    counts = {status: 0 for status in PermitStatus}
    total = 0
    for permit in permits:
        total += 1
        counts[permit.status] += 1
    return Stats(
        total=total,
        active=counts[PermitStatus.ACTIVE],
        expired=counts[PermitStatus.EXPIRED],
        revoked=counts[PermitStatus.REVOKED],
    )


def status_distribution(stats: Stats) -> List[Dict[str, object]]:
    """Rows for the compliance bar chart"""
    return [
        {"name": "Active", "value": stats.active, "color": "#059669"},
        {"name": "Expired", "value": stats.expired, "color": "#d97706"},
        {"name": "Revoked", "value": stats.revoked, "color": "#dc2626"},
    ]


def nearing_expiry(permits: Iterable[Permit], today: date, window_days: int = 30) -> List[Permit]:
    """Active permits expiring between today and today + window_days inclusive, most urgent first"""
    horizon = today + timedelta(days=window_days)
    watch = [
        p for p in permits
        if p.is_active and p.expiry is not None and today <= p.expiry <= horizon
    ]
    return sorted(watch, key=lambda p: p.expiry)


def days_until_expiry(permit: Permit, today: date) -> Optional[int]:
    expiry = permit.expiry
    if expiry is None:
        return None
    return (expiry - today).days


def is_expired(permit: Permit, today: date) -> bool:
    """Expiry date strictly before today; status is not consulted"""
    expiry = permit.expiry
    return expiry is not None and expiry < today


def recent_permits(permits: Iterable[Permit], limit: int = 5) -> List[Permit]:
    """Newest permits by createdAt"""
    ordered = sorted(permits, key=lambda p: p.created or _EPOCH, reverse=True)
    return ordered[:limit]


def search_permit(permits: Sequence[Permit], query: str) -> Optional[Permit]:
    """
    Find one permit for the verification page.

    Exact permit number wins over exact plate, which wins over an operator
    name substring. Returns None when nothing matches or the query is blank.
    """
    term = (query or "").strip().upper()
    if not term:
        return None

    for permit in permits:
        if permit.permit_number.upper() == term:
            return permit
    for permit in permits:
        if permit.vehicle_reg.upper() == term:
            return permit
    for permit in permits:
        if term in permit.operator_name.upper():
            return permit
    return None


def filter_report(permits: Iterable[Permit], report_filter: ReportFilter) -> List[Permit]:
    """Apply the report filters as a conjunction; input order is preserved"""
    status = report_filter.status or ALL_STATUSES
    route = (report_filter.route or "").strip().lower()
    rows = []

    for permit in permits:
        if status != ALL_STATUSES and permit.status.value != status:
            continue
        if report_filter.date_from or report_filter.date_to:
            issued = permit.issued
            if issued is None:
                continue
            if report_filter.date_from and issued < report_filter.date_from:
                continue
            if report_filter.date_to and issued > report_filter.date_to:
                continue
        if route and route not in permit.route.lower():
            continue
        rows.append(permit)

    return rows


def has_active_duplicate(permits: Iterable[Permit], vehicle_reg: str) -> bool:
    """True if the registration already holds an ACTIVE permit"""
    wanted = (vehicle_reg or "").strip().upper()
    return any(p.is_active and p.vehicle_reg.upper() == wanted for p in permits)


def printable_permits(permits: Iterable[Permit]) -> List[Permit]:
    """Only active permits are issued security discs"""
    return [p for p in permits if p.is_active]


def next_permit_number(permits: Sequence[Permit], year: int, prefix: str = "PTA") -> str:
    """
    Sequence is collection size + 1. Two sessions registering at the same time
    can produce the same number.
    """
    return f"{prefix}-{year}-{len(permits) + 1:04d}"
