"""
Service manager client — typed systemctl operations.

Reads (is-active, UnitFileState) are plain calls; writes (enable,
disable, start, stop, unmask, daemon-reload) are privileged. All text
interpretation is delegated to the normalizer.
"""

from __future__ import annotations

import logging

from bsnap.adapters.base import CommandRunner
from bsnap.core.models.action import CommandResult
from bsnap.core.models.service import ServiceState
from bsnap.core.services import normalizer

logger = logging.getLogger(__name__)


class ServiceManagerClient:
    """systemctl through a CommandRunner."""

    binary = "systemctl"

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def is_available(self) -> bool:
        return self._runner.which(self.binary)

    # ── Reads ───────────────────────────────────────────────────

    def is_active(self, unit: str) -> bool | None:
        result = self._runner.run([self.binary, "is-active", unit])
        return normalizer.parse_service_active(result)

    def enabled_state(self, unit: str) -> ServiceState:
        """Enabled axis only (``active`` left unknown)."""
        result = self._runner.run(
            [self.binary, "show", "-p", "UnitFileState", "--value", unit]
        )
        enabled, raw = normalizer.parse_service_enabled(result)
        return ServiceState(enabled=enabled, enabled_raw=raw)

    def query(self, unit: str) -> ServiceState:
        """Both axes, queried fresh."""
        enabled = self.enabled_state(unit)
        return enabled.model_copy(update={"active": self.is_active(unit)})

    # ── Writes ──────────────────────────────────────────────────

    def _mutate(self, verb: str, unit: str | None, best_effort: bool) -> CommandResult:
        argv = [self.binary, verb] + ([unit] if unit else [])
        return self._runner.run(argv, privileged=True, best_effort=best_effort)

    def unmask(self, unit: str, *, best_effort: bool = True) -> CommandResult:
        return self._mutate("unmask", unit, best_effort)

    def enable(self, unit: str, *, best_effort: bool = False) -> CommandResult:
        return self._mutate("enable", unit, best_effort)

    def enable_now(self, unit: str, *, best_effort: bool = True) -> CommandResult:
        return self._runner.run(
            [self.binary, "enable", "--now", unit], privileged=True, best_effort=best_effort
        )

    def disable(self, unit: str, *, best_effort: bool = False) -> CommandResult:
        return self._mutate("disable", unit, best_effort)

    def start(self, unit: str, *, best_effort: bool = True) -> CommandResult:
        return self._mutate("start", unit, best_effort)

    def stop(self, unit: str, *, best_effort: bool = False) -> CommandResult:
        return self._mutate("stop", unit, best_effort)

    def daemon_reload(self) -> CommandResult:
        return self._mutate("daemon-reload", None, True)
