"""
Service reconciler — drive a unit towards ON or OFF.

Each unit has two independent axes, active and enabled. The
reconciler queries before it mutates so that an already-satisfied
state is a clean "unchanged" outcome instead of an ambiguous exit
status from the service manager.

    ON  (active ∧ enabled)   already active → nothing to do
                             else unmask~ → enable → start~ → reload~
    OFF (¬active ∧ ¬enabled) stop if active, then disable if enabled,
                             then reload~ if anything was mutated

    ~ best-effort: failure is logged and ignored
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bsnap.adapters.systemd import ServiceManagerClient
from bsnap.core.models.action import CommandResult, Receipt
from bsnap.core.models.selection import resolve_ordinal
from bsnap.core.models.service import (
    EnabledState,
    ReconcileReport,
    ServiceDescriptor,
    ServiceState,
)

logger = logging.getLogger(__name__)

# Enabled states that already satisfy "not enabled", with the reason shown
_NOT_ENABLED_REASONS: dict[EnabledState, str] = {
    EnabledState.DISABLED: "is already disabled",
    EnabledState.STATIC: "is a static unit (nothing to disable)",
    EnabledState.INDIRECT: "is an indirect unit (nothing to disable)",
    EnabledState.MASKED: "is masked (nothing to disable)",
}


class ServiceReconciler:
    """ON/OFF transitions for a fixed, injected set of units."""

    def __init__(self, client: ServiceManagerClient, services: Sequence[ServiceDescriptor]):
        self._client = client
        self._services = tuple(services)

    @property
    def services(self) -> tuple[ServiceDescriptor, ...]:
        return self._services

    def describe(self, choice: str) -> ServiceDescriptor:
        """Resolve a 1-based ordinal typed by the user."""
        return resolve_ordinal(choice, self._services)

    # ── Queries (read-only) ─────────────────────────────────────

    def status(self, service: ServiceDescriptor) -> ServiceState:
        return self._client.query(service.name)

    def status_all(self) -> list[tuple[ServiceDescriptor, ServiceState]]:
        return [(s, self.status(s)) for s in self._services]

    # ── Intents ─────────────────────────────────────────────────

    def turn_on(self, service: ServiceDescriptor) -> ReconcileReport:
        """Make ``service`` active and enabled."""
        unit = service.name
        report = ReconcileReport(service=unit, intent="on")

        if self._client.is_active(unit):
            report.phases.append(Receipt.unchanged("on", unit, f"[{unit}] is already ON"))
            return report

        self._record(report, self._client.unmask(unit))
        enabled = self._record(report, self._client.enable(unit))
        if not enabled.ok:
            report.phases.append(Receipt.failure(
                "on", unit, f"Failed to enable [{unit}]", detail=enabled.diagnostic,
            ))
            self._record(report, self._client.daemon_reload())
            return report

        started = self._record(report, self._client.start(unit))
        if not started.ok:
            logger.warning("[%s] enabled but failed to start: %s", unit, started.diagnostic)
        self._record(report, self._client.daemon_reload())

        report.phases.append(Receipt.success("on", unit, f"[{unit}] has been turned ON"))
        return report

    def turn_off(self, service: ServiceDescriptor) -> ReconcileReport:
        """Make ``service`` inactive and disabled.

        Stopping and disabling are independent: a unit can be stopped
        but enabled, or running but disabled, so both phases run.
        """
        unit = service.name
        report = ReconcileReport(service=unit, intent="off")

        report.phases.append(self._stop_phase(unit, report))
        report.phases.append(self._disable_phase(unit, report))

        if report.mutating_calls:
            self._record(report, self._client.daemon_reload())
        return report

    # ── Internals ───────────────────────────────────────────────

    def _stop_phase(self, unit: str, report: ReconcileReport) -> Receipt:
        active = self._client.is_active(unit)
        if active is None:
            return Receipt.failure("stop", unit, f"Cannot determine whether [{unit}] is running")
        if not active:
            return Receipt.unchanged("stop", unit, f"[{unit}] is already OFF")

        stopped = self._record(report, self._client.stop(unit))
        if not stopped.ok:
            return Receipt.failure("stop", unit, f"Failed to stop [{unit}]", detail=stopped.diagnostic)
        return Receipt.success("stop", unit, f"[{unit}] has been stopped")

    def _disable_phase(self, unit: str, report: ReconcileReport) -> Receipt:
        state = self._client.enabled_state(unit)

        reason = _NOT_ENABLED_REASONS.get(state.enabled)
        if reason is not None:
            return Receipt.unchanged("disable", unit, f"[{unit}] {reason}")
        if state.enabled is EnabledState.UNKNOWN and not state.is_other:
            return Receipt.failure(
                "disable", unit, f"Cannot determine whether [{unit}] is enabled",
            )

        disabled = self._record(report, self._client.disable(unit))
        if not disabled.ok:
            return Receipt.failure(
                "disable", unit, f"Failed to disable [{unit}]", detail=disabled.diagnostic,
            )
        return Receipt.success("disable", unit, f"[{unit}] has been disabled")

    @staticmethod
    def _record(report: ReconcileReport, result: CommandResult) -> CommandResult:
        report.commands.append(result)
        return result
