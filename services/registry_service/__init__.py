"""
Registry service - session store, projections, mutations, exports and discs.
"""

from .errors import (
    RegistryError,
    SyncFailure,
    ValidationFailure,
    AuthFailure,
    InvalidCredentials,
    AuthorizationDenial,
)
from .models import Permit, PermitStatus, PermitRegistration, ReportFilter, Stats, ALL_STATUSES

__all__ = [
    'RegistryError',
    'SyncFailure',
    'ValidationFailure',
    'AuthFailure',
    'InvalidCredentials',
    'AuthorizationDenial',
    'Permit',
    'PermitStatus',
    'PermitRegistration',
    'ReportFilter',
    'Stats',
    'ALL_STATUSES',
]
