"""
Launcher — the ``bsnap`` command installed at a fixed path.

The script is rendered locally and written in one privileged
``install`` call, so an update is a plain overwrite and nothing
downloaded is ever installed.
"""

from __future__ import annotations

import logging
import shlex
import sys
from pathlib import PurePosixPath

from bsnap.adapters.base import CommandRunner
from bsnap.core.models.action import Receipt

logger = logging.getLogger(__name__)

_TEMPLATE = """\
#!/bin/sh
# bsnap launcher: opens the bsnap installer menu
exec {python} -m bsnap.main "$@"
"""


class LauncherInstaller:
    """Install or update the launcher script."""

    def __init__(self, runner: CommandRunner, path: str, python: str | None = None):
        self._runner = runner
        self._path = path
        self._python = python or sys.executable

    @property
    def path(self) -> str:
        return self._path

    def render(self) -> str:
        return _TEMPLATE.format(python=shlex.quote(self._python))

    def install(self) -> Receipt:
        parent = str(PurePosixPath(self._path).parent)
        mkdir = self._runner.run(["mkdir", "-p", parent], privileged=True)
        if not mkdir.ok:
            return Receipt.failure(
                "launcher", self._path, f"Cannot create {parent}", detail=mkdir.diagnostic,
            )

        result = self._runner.run(
            ["install", "-m", "0755", "/dev/stdin", self._path],
            privileged=True,
            input=self.render(),
        )
        if not result.ok:
            return Receipt.failure(
                "launcher", self._path, "Failed to install launcher", detail=result.diagnostic,
            )
        logger.info("Launcher written to %s", self._path)
        return Receipt.success("launcher", self._path, f"Installed/updated launcher: {self._path}")
