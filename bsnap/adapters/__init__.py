"""Adapters — command execution and typed tool clients.

Public re-exports for convenient access.
"""

from bsnap.adapters.base import CommandRunner
from bsnap.adapters.mock import MockRunner
from bsnap.adapters.snap import PackageToolClient
from bsnap.adapters.systemd import ServiceManagerClient

__all__ = [
    "CommandRunner",
    "MockRunner",
    "PackageToolClient",
    "ServiceManagerClient",
]
