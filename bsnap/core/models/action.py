"""
CommandResult and Receipt models — the execution contract.

Runners execute commands and return CommandResults. Core services
turn those into Receipts, the user-facing outcome of one step.
Neither side raises for a failed command: failures are data.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class CommandResult(BaseModel):
    """Captured outcome of one external command.

    ``command`` is the argv as requested by the caller, without any
    ``sudo`` prefix the runner may have added for privileged calls.
    """

    command: list[str]
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    privileged: bool = False        # mutating call (runs through sudo)
    best_effort: bool = False       # failure is a no-op for the caller

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0

    @property
    def ran(self) -> bool:
        """Whether the command could be started at all."""
        return self.exit_code not in (126, 127)

    @property
    def diagnostic(self) -> str:
        """The tool's own error text, falling back to stdout or the exit code."""
        return (
            self.stderr.strip()
            or self.stdout.strip()
            or f"exit status {self.exit_code}"
        )

    def display(self) -> str:
        """Shell-like rendering of the command for logs and messages."""
        return " ".join(self.command)


class Receipt(BaseModel):
    """Result of one user-facing step.

    ``unchanged`` is the "already satisfied" outcome: nothing had to be
    done and nothing was mutated. ``detail`` carries the raw diagnostic
    of the failing tool.
    """

    operation: str
    target: str = ""
    status: Literal["ok", "unchanged", "failed"] = "ok"
    message: str = ""
    detail: str = ""

    @property
    def ok(self) -> bool:
        """Whether the step succeeded (including "already satisfied")."""
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, operation: str, target: str, message: str, **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(operation=operation, target=target, status="ok", message=message, **kwargs)

    @classmethod
    def unchanged(cls, operation: str, target: str, message: str, **kwargs: Any) -> Receipt:
        """Create an already-satisfied receipt."""
        return cls(
            operation=operation, target=target, status="unchanged", message=message, **kwargs
        )

    @classmethod
    def failure(
        cls,
        operation: str,
        target: str,
        message: str,
        detail: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            operation=operation,
            target=target,
            status="failed",
            message=message,
            detail=detail,
            **kwargs,
        )
