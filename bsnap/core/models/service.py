"""
Service models — configured units and their live state.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from bsnap.core.models.action import CommandResult, Receipt


class EnabledState(str, Enum):
    """Unit file state as reported by the service manager."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    STATIC = "static"
    INDIRECT = "indirect"
    MASKED = "masked"
    UNKNOWN = "unknown"


class ServiceDescriptor(BaseModel):
    """A statically configured unit (e.g. ``snapd.socket``)."""

    model_config = ConfigDict(frozen=True)

    name: str


class ServiceState(BaseModel):
    """Live projection of one unit, queried fresh every time.

    ``active`` is None when the query could not be answered.
    ``enabled_raw`` keeps the service manager's own wording so states
    outside the known vocabulary can still be shown verbatim.
    """

    model_config = ConfigDict(frozen=True)

    active: bool | None = None
    enabled: EnabledState = EnabledState.UNKNOWN
    enabled_raw: str = "unknown"

    @property
    def is_other(self) -> bool:
        """An unrecognized enabled state (e.g. ``enabled-runtime``)."""
        return self.enabled is EnabledState.UNKNOWN and self.enabled_raw != "unknown"


class ReconcileReport(BaseModel):
    """Everything one ON/OFF intent did to a unit."""

    service: str
    intent: Literal["on", "off"]
    phases: list[Receipt] = Field(default_factory=list)
    commands: list[CommandResult] = Field(default_factory=list)

    @property
    def status(self) -> Literal["ok", "unchanged", "failed"]:
        if any(p.failed for p in self.phases):
            return "failed"
        if self.phases and all(p.status == "unchanged" for p in self.phases):
            return "unchanged"
        return "ok"

    @property
    def mutating_calls(self) -> list[CommandResult]:
        """Privileged commands issued while reconciling."""
        return [c for c in self.commands if c.privileged]
