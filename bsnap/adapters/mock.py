"""
Mock runner — scripted test double for command execution.

Returns canned CommandResults keyed by argv without touching the
system. Unscripted commands succeed with empty output.
"""

from __future__ import annotations

from bsnap.adapters.base import CommandRunner
from bsnap.core.models.action import CommandResult


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    By default every command succeeds with empty output. Responses
    can be set per exact argv, and binaries can be marked present.
    """

    def __init__(self, binaries: set[str] | None = None):
        self._binaries = set(binaries or ())
        self._responses: dict[tuple[str, ...], CommandResult] = {}
        self._call_log: list[CommandResult] = []
        self.inputs: list[str | None] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[CommandResult]:
        """All results this mock has returned, in call order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls(self, *prefix: str) -> list[list[str]]:
        """Argv of every call starting with ``prefix``."""
        n = len(prefix)
        return [c.command for c in self._call_log if tuple(c.command[:n]) == prefix]

    def which(self, binary: str) -> bool:
        return binary in self._binaries

    def add_binary(self, binary: str) -> None:
        self._binaries.add(binary)

    def set_response(
        self,
        argv: list[str],
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
    ) -> None:
        """Script the result for one exact argv."""
        self._responses[tuple(argv)] = CommandResult(
            command=list(argv), exit_code=exit_code, stdout=stdout, stderr=stderr
        )

    def set_failure(self, argv: list[str], stderr: str = "Mock failure", exit_code: int = 1) -> None:
        """Configure a specific command to fail."""
        self.set_response(argv, stderr=stderr, exit_code=exit_code)

    def _execute(
        self,
        argv: list[str],
        *,
        privileged: bool,
        input: str | None,
    ) -> CommandResult:
        scripted = self._responses.get(tuple(argv))
        if scripted is None:
            scripted = CommandResult(command=argv)
        return scripted.model_copy(update={"privileged": privileged})

    def run(
        self,
        argv: list[str],
        *,
        privileged: bool = False,
        best_effort: bool = False,
        input: str | None = None,
    ) -> CommandResult:
        result = super().run(argv, privileged=privileged, best_effort=best_effort, input=input)
        self._call_log.append(result)
        self.inputs.append(input)
        return result

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()
        self.inputs.clear()
