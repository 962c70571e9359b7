"""
Package tool client — typed snap operations.

Search output mode is chosen by probing ``snap find --help`` before
searching, never by sniffing the search output afterwards.
"""

from __future__ import annotations

import logging

from bsnap.adapters.base import CommandRunner
from bsnap.core.models.action import CommandResult
from bsnap.core.models.package import InstallRequest, InstalledPackage, SearchHit
from bsnap.core.services import normalizer
from bsnap.core.services.normalizer import OutputFormat

logger = logging.getLogger(__name__)

TABULAR_FLAG = "--format=tsv"


class PackageToolClient:
    """snap through a CommandRunner."""

    binary = "snap"

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def is_available(self) -> bool:
        return self._runner.which(self.binary)

    def search_format(self) -> OutputFormat:
        """Probe which output mode ``snap find`` supports."""
        probe = self._runner.run([self.binary, "find", "--help"])
        help_text = probe.stdout + probe.stderr
        fmt: OutputFormat = "tabular" if normalizer.supports_tabular(help_text) else "classic"
        logger.debug("snap find output mode: %s", fmt)
        return fmt

    def find_argv(self, query: str, output_format: OutputFormat) -> list[str]:
        """``snap find`` arguments; ``--`` keeps a leading dash in the query literal."""
        argv = [self.binary, "find"]
        if output_format == "tabular":
            argv.append(TABULAR_FLAG)
        return argv + ["--", query]

    def authorize(self) -> CommandResult:
        """Obtain privileges for the next install/remove up front."""
        return self._runner.authorize()

    def search(
        self,
        query: str,
        output_format: OutputFormat,
        cap: int,
    ) -> tuple[CommandResult, list[SearchHit], int]:
        """Run a catalog search.

        Returns:
            ``(result, hits, dropped)``. ``hits`` is empty when the
            command failed; callers must check ``result.ok``.
        """
        result = self._runner.run(self.find_argv(query, output_format))
        if not result.ok:
            return result, [], 0
        hits, dropped = normalizer.parse_search_rows(result.stdout, output_format, cap)
        return result, hits, dropped

    def list_installed(self) -> tuple[CommandResult, list[InstalledPackage]]:
        result = self._runner.run([self.binary, "list"])
        if not result.ok:
            return result, []
        return result, normalizer.parse_installed_rows(result.stdout)

    def install(self, request: InstallRequest) -> CommandResult:
        return self._runner.run(request.argv(), privileged=True)

    def remove(self, name: str) -> CommandResult:
        return self._runner.run([self.binary, "remove", name], privileged=True)
