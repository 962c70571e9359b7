"""
Runner base — the protocol contract between core services and the system.

Core services only talk to external tools through a CommandRunner,
never through subprocess directly. That keeps every side effect in
one replaceable place (the real runner, or MockRunner in tests).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from bsnap.core.models.action import CommandResult

logger = logging.getLogger(__name__)


class CommandRunner(ABC):
    """Abstract base class for command execution.

    Runners NEVER raise for a failed command. A non-zero exit, a
    missing binary or an OS error all come back as a CommandResult,
    and callers inspect ``result.ok`` explicitly.

    Two modes:
        - significant (default): the caller reports the failure.
        - best-effort: the caller treats a failure as a no-op. The
          runner logs it at DEBUG so it is still traceable.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g. 'subprocess', 'mock')."""

    @abstractmethod
    def which(self, binary: str) -> bool:
        """Check whether ``binary`` is on PATH. Fast, never raises."""

    @abstractmethod
    def _execute(
        self,
        argv: list[str],
        *,
        privileged: bool,
        input: str | None,
    ) -> CommandResult:
        """Run ``argv`` and capture its outcome. MUST never raise."""

    def run(
        self,
        argv: list[str],
        *,
        privileged: bool = False,
        best_effort: bool = False,
        input: str | None = None,
    ) -> CommandResult:
        """Execute a command and return its captured result.

        Args:
            argv: Command and arguments, without any ``sudo`` prefix.
            privileged: Mutating call that needs root.
            best_effort: Failure is expected to be ignored by the caller.
            input: Optional text piped to the command's stdin.
        """
        logger.debug("Executing: %s%s", "[root] " if privileged else "", " ".join(argv))
        result = self._execute(list(argv), privileged=privileged, input=input)
        result = result.model_copy(update={"best_effort": best_effort})

        if not result.ok:
            if best_effort:
                logger.debug(
                    "Best-effort step failed (ignored): %s → %s",
                    result.display(), result.diagnostic,
                )
            else:
                logger.info("Command failed: %s → %s", result.display(), result.diagnostic)
        return result

    def authorize(self) -> CommandResult:
        """Acquire privileges for upcoming privileged calls.

        Lets an interactive credential prompt run while the terminal is
        still free, before output is hidden behind a spinner. Runners
        without a prompt have nothing to do.
        """
        return CommandResult(command=[])

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
