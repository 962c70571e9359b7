"""
Shared test fixtures and configuration.

``FakeSystem`` is a CommandRunner that simulates systemctl and snap
with real state, so reconciler and pipeline tests can observe the
effect of the calls they make instead of only the calls themselves.
"""

from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass

import pytest

from bsnap.adapters.base import CommandRunner
from bsnap.core.models.action import CommandResult

SNAP_HELP_TABULAR = textwrap.dedent("""\
    Usage:
      snap [OPTIONS] find [find-OPTIONS] [<query>...]

    [find command options]
          --narrow          Only search for snaps in "stable"
          --section=        Restrict the search to a given section
          --format=         Output format (tsv)
""")

SNAP_HELP_CLASSIC = textwrap.dedent("""\
    Usage:
      snap [OPTIONS] find [find-OPTIONS] [<query>...]

    [find command options]
          --narrow          Only search for snaps in "stable"
          --section=        Restrict the search to a given section
""")

VLC_TSV = (
    "vlc\t3.0.20\tvideolan✓\tstable\tThe ultimate media player\n"
    "vlc-nightly\t4.0.0\tvideolan✓\tedge\tNightly builds of VLC\n"
    "mpv\t0.37\tsnapcrafters✪\tstable\tLightweight media player\n"
)

HELLO_CLASSIC = textwrap.dedent("""\
    Name            Version  Publisher     Notes  Summary
    ----            -------  ---------     -----  -------
    hello           2.10     canonical✓    -      GNU Hello, the "hello world" snap
    hello-world     6.4      canonical✓    -      The 'hello-world' of snaps
    ─────────────────────────────────────────────────
    hello-webapp    1.0      someone       -      A tiny web app
""")

SNAP_LIST = textwrap.dedent("""\
    Name      Version    Rev    Tracking       Publisher   Notes
    core22    20240111   1122   latest/stable  canonical✓  base
    firefox   124.0      3972   latest/stable  mozilla✓    -
    vlc       3.0.20     3777   latest/stable  videolan✓   -
""")


def tsv_find(query: str) -> list[str]:
    """argv of a tab-separated catalog search."""
    return ["snap", "find", "--format=tsv", "--", query]


@dataclass
class FakeUnit:
    active: bool = False
    enabled: str = "disabled"


class FakeSystem(CommandRunner):
    """Stateful systemctl/snap simulator.

    ``fail`` holds ``(verb, unit)`` pairs (or ``(verb, None)`` for all
    units) whose systemctl call fails; ``deny_sudo`` fails ``sudo -v``.
    snap and any other command are answered from ``responses`` (exact
    argv), else succeed silently.
    """

    def __init__(self, units: dict[str, FakeUnit] | None = None, binaries: set[str] | None = None):
        self.units: dict[str, FakeUnit] = dict(units or {})
        self.binaries: set[str] = set(binaries if binaries is not None else {"systemctl", "snap"})
        self.fail: set[tuple[str, str | None]] = set()
        self.query_fails = False
        self.deny_sudo = False
        self.responses: dict[tuple[str, ...], CommandResult] = {}
        self.log: list[CommandResult] = []

    @property
    def name(self) -> str:
        return "fake"

    def which(self, binary: str) -> bool:
        return binary in self.binaries

    def respond(self, argv: list[str], stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self.responses[tuple(argv)] = CommandResult(
            command=list(argv), stdout=stdout, stderr=stderr, exit_code=exit_code
        )

    def mutating(self) -> list[list[str]]:
        return [c.command for c in self.log if c.privileged]

    def calls(self, *prefix: str) -> list[list[str]]:
        n = len(prefix)
        return [c.command for c in self.log if tuple(c.command[:n]) == prefix]

    def run(self, argv, *, privileged=False, best_effort=False, input=None):
        result = super().run(argv, privileged=privileged, best_effort=best_effort, input=input)
        self.log.append(result)
        return result

    def authorize(self) -> CommandResult:
        if self.deny_sudo:
            result = CommandResult(
                command=["sudo", "-v"], exit_code=1, stderr="sudo: 3 incorrect password attempts"
            )
        else:
            result = CommandResult(command=["sudo", "-v"])
        self.log.append(result)
        return result

    def _execute(self, argv, *, privileged, input):
        if argv[0] == "systemctl":
            result = self._systemctl(argv)
        else:
            scripted = self.responses.get(tuple(argv))
            result = scripted or CommandResult(command=list(argv))
        return result.model_copy(update={"privileged": privileged})

    # ── systemctl ───────────────────────────────────────────────

    def _systemctl(self, argv: list[str]) -> CommandResult:
        verb, unit = argv[1], (argv[-1] if len(argv) > 2 else None)

        if verb in ("is-active", "show"):
            if self.query_fails:
                return CommandResult(command=argv, exit_code=1, stderr="Failed to connect to bus")
            u = self.units.setdefault(unit, FakeUnit())
            if verb == "is-active":
                return CommandResult(
                    command=argv,
                    exit_code=0 if u.active else 3,
                    stdout="active\n" if u.active else "inactive\n",
                )
            return CommandResult(command=argv, stdout=f"{u.enabled}\n")

        if (verb, unit) in self.fail or (verb, None) in self.fail:
            return CommandResult(
                command=argv, exit_code=1, stderr=f"Failed to {verb} unit {unit}: Access denied",
            )
        if verb == "daemon-reload":
            return CommandResult(command=argv)

        u = self.units.setdefault(unit, FakeUnit())
        if verb == "unmask" and u.enabled == "masked":
            u.enabled = "disabled"
        elif verb == "enable":
            if u.enabled == "masked":
                return CommandResult(command=argv, exit_code=1, stderr=f"Failed to enable unit: Unit file {unit} is masked.")
            if u.enabled not in ("static", "indirect"):
                u.enabled = "enabled"
            if "--now" in argv:
                u.active = True
        elif verb == "disable" and u.enabled.startswith("enabled"):
            u.enabled = "disabled"
        elif verb == "start":
            if u.enabled == "masked":
                return CommandResult(command=argv, exit_code=1, stderr=f"Failed to start {unit}: Unit {unit} is masked.")
            u.active = True
        elif verb == "stop":
            u.active = False
        return CommandResult(command=argv)


@pytest.fixture
def fake_system() -> FakeSystem:
    """Fresh simulator with snap present and no units configured."""
    return FakeSystem()


@pytest.fixture
def snap_system(fake_system: FakeSystem) -> FakeSystem:
    """Simulator whose snap supports tab-separated search output."""
    fake_system.respond(["snap", "find", "--help"], stdout=SNAP_HELP_TABULAR)
    fake_system.respond(tsv_find("vlc"), stdout=VLC_TSV)
    fake_system.respond(["snap", "list"], stdout=SNAP_LIST)
    return fake_system


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo ``setup_logging`` side effects between tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
