"""
Domain models — Pydantic types for bsnap.

All models are re-exported here for convenient access:

    from bsnap.core.models import Receipt, ServiceState, SearchResultSet
"""

from bsnap.core.models.action import CommandResult, Receipt
from bsnap.core.models.package import (
    Channel,
    InstalledListing,
    InstalledOutcome,
    InstalledPackage,
    InstallRequest,
    SearchHit,
    SearchOutcome,
    SearchResultSet,
)
from bsnap.core.models.selection import SelectionError, resolve_ordinal
from bsnap.core.models.service import (
    EnabledState,
    ReconcileReport,
    ServiceDescriptor,
    ServiceState,
)
from bsnap.core.models.settings import Settings

__all__ = [
    # package.py
    "Channel",
    # action.py
    "CommandResult",
    # service.py
    "EnabledState",
    "InstallRequest",
    "InstalledListing",
    "InstalledOutcome",
    "InstalledPackage",
    "Receipt",
    "ReconcileReport",
    "SearchHit",
    "SearchOutcome",
    "SearchResultSet",
    # selection.py
    "SelectionError",
    "ServiceDescriptor",
    "ServiceState",
    # settings.py
    "Settings",
    "resolve_ordinal",
]
