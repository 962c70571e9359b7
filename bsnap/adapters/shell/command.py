"""
Subprocess runner — execute system commands and capture their output.

The SINGLE PLACE where ``subprocess.run`` is called. Privileged calls
get a ``sudo`` prefix unless the process already runs as root; sudo
asks for a password on the controlling terminal if it needs one.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

from bsnap.adapters.base import CommandRunner
from bsnap.core.models.action import CommandResult

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Run commands on the local system.

    No timeout is enforced: the external tools (snap, systemctl, the
    OS package manager) apply their own.
    """

    def __init__(self, sudo: str = "sudo"):
        self._sudo = sudo

    @property
    def name(self) -> str:
        return "subprocess"

    def which(self, binary: str) -> bool:
        return shutil.which(binary) is not None

    def _needs_sudo(self) -> bool:
        return os.geteuid() != 0

    def authorize(self) -> CommandResult:
        """Validate sudo credentials (``sudo -v``); prompts on the terminal."""
        if not self._needs_sudo():
            return CommandResult(command=[])
        return self.run([self._sudo, "-v"])

    def _execute(
        self,
        argv: list[str],
        *,
        privileged: bool,
        input: str | None,
    ) -> CommandResult:
        cmd = list(argv)
        if privileged and self._needs_sudo():
            cmd = [self._sudo] + cmd

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                input=input,
            )
        except FileNotFoundError:
            return CommandResult(
                command=argv,
                exit_code=127,
                stderr=f"Command not found: {cmd[0]}",
                privileged=privileged,
            )
        except OSError as e:
            logger.warning("OS error running %s: %s", cmd[0], e)
            return CommandResult(
                command=argv,
                exit_code=126,
                stderr=f"Command execution error: {e}",
                privileged=privileged,
            )

        return CommandResult(
            command=argv,
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            privileged=privileged,
        )
