"""
Bootstrap — install snapd when the ``snap`` command is missing.

Detects the OS package manager by probing binaries in a fixed
preference order, installs snapd with it, then switches the
configured units on and creates the classic ``/snap`` symlink that
some distributions leave out.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from bsnap.adapters.base import CommandRunner
from bsnap.adapters.systemd import ServiceManagerClient
from bsnap.core.models.action import CommandResult, Receipt
from bsnap.core.models.service import ServiceDescriptor

logger = logging.getLogger(__name__)

# (package manager id, binary probed) in preference order
PACKAGE_MANAGERS: tuple[tuple[str, str], ...] = (
    ("apt", "apt-get"),
    ("dnf", "dnf"),
    ("yum", "yum"),
    ("zypper", "zypper"),
    ("pacman", "pacman"),
)

SNAP_MOUNT = "/snap"
SNAP_MOUNT_TARGET = "/var/lib/snapd/snap"


@dataclass(frozen=True)
class InstallStep:
    """One OS package manager command of the snapd install."""

    argv: tuple[str, ...]
    best_effort: bool = False


_INSTALL_STEPS: dict[str, tuple[InstallStep, ...]] = {
    "apt": (
        InstallStep(("apt-get", "update", "-y")),
        InstallStep(("apt-get", "install", "-y", "snapd", "apparmor")),
    ),
    "dnf": (
        InstallStep(("dnf", "install", "-y", "snapd")),
    ),
    "yum": (
        InstallStep(("yum", "install", "-y", "epel-release"), best_effort=True),
        InstallStep(("yum", "install", "-y", "snapd")),
    ),
    "zypper": (
        InstallStep(("zypper", "--non-interactive", "install", "snapd")),
    ),
    "pacman": (
        InstallStep(("pacman", "-Syu", "--noconfirm", "snapd")),
    ),
}


def detect_package_manager(runner: CommandRunner) -> str:
    """Return the first available package manager id, or ``"unknown"``."""
    for pm_id, binary in PACKAGE_MANAGERS:
        if runner.which(binary):
            return pm_id
    return "unknown"


def install_steps(pm: str) -> tuple[InstallStep, ...]:
    """Commands that install snapd with ``pm`` (empty if unsupported)."""
    return _INSTALL_STEPS.get(pm, ())


@dataclass
class BootstrapReport:
    """What the snapd install flow did."""

    package_manager: str = "unknown"
    receipt: Receipt | None = None
    commands: list[CommandResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.receipt is not None and self.receipt.ok


class SnapBootstrap:
    """Make sure the package tool exists before a manager menu opens."""

    def __init__(
        self,
        runner: CommandRunner,
        services: Sequence[ServiceDescriptor],
        snap_binary: str = "snap",
    ):
        self._runner = runner
        self._systemd = ServiceManagerClient(runner)
        self._services = tuple(services)
        self._snap_binary = snap_binary

    def is_installed(self) -> bool:
        return self._runner.which(self._snap_binary)

    def ensure(self) -> BootstrapReport:
        """Install snapd unless ``snap`` is already on PATH."""
        report = BootstrapReport()
        if self.is_installed():
            report.receipt = Receipt.unchanged("bootstrap", "snapd", "snap is installed.")
            return report

        pm = detect_package_manager(self._runner)
        report.package_manager = pm
        logger.info("snap missing; detected package manager: %s", pm)

        steps = install_steps(pm)
        if not steps:
            report.receipt = Receipt.failure(
                "bootstrap", "snapd", "Unsupported package manager. Install snapd manually.",
            )
            return report

        for step in steps:
            result = self._runner.run(
                list(step.argv), privileged=True, best_effort=step.best_effort
            )
            report.commands.append(result)
            if not result.ok and not step.best_effort:
                report.receipt = Receipt.failure(
                    "bootstrap", "snapd", f"Failed to install snapd via {pm}.",
                    detail=result.diagnostic,
                )
                return report

        self._enable_services(report)
        self._link_snap_mount(report)

        if not self.is_installed():
            report.receipt = Receipt.failure(
                "bootstrap", "snapd",
                "snapd was installed but the snap command is still not on PATH.",
                detail="Open a new login shell or reboot, then try again.",
            )
            return report

        report.receipt = Receipt.success("bootstrap", "snapd", "Snapd installation completed.")
        return report

    def _enable_services(self, report: BootstrapReport) -> None:
        for service in self._services:
            report.commands.append(self._systemd.unmask(service.name))
            report.commands.append(self._systemd.enable_now(service.name))
        report.commands.append(self._systemd.daemon_reload())

    def _link_snap_mount(self, report: BootstrapReport) -> None:
        test = self._runner.run(["test", "-e", SNAP_MOUNT])
        if test.ok:
            return
        if not self._runner.run(["test", "-d", SNAP_MOUNT_TARGET]).ok:
            return
        logger.info("Creating %s -> %s", SNAP_MOUNT, SNAP_MOUNT_TARGET)
        report.commands.append(self._runner.run(
            ["ln", "-s", SNAP_MOUNT_TARGET, SNAP_MOUNT], privileged=True, best_effort=True,
        ))
