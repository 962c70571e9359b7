"""
Interactive menus — the blocking request/response loop.

One user action runs one core operation to completion before the next
prompt. Invalid input is rejected with a warning and never leaves the
menu; end of input (Ctrl-D) quits cleanly.
"""

from __future__ import annotations

import logging

import click

from bsnap.core.models.package import Channel, InstallRequest, SearchHit, SearchResultSet
from bsnap.core.models.selection import SelectionError
from bsnap.core.models.service import ServiceDescriptor
from bsnap.core.services.bootstrap import SnapBootstrap
from bsnap.core.services.launcher import LauncherInstaller
from bsnap.core.services.packages import AFFIRMATIVE_TOKENS, BACK_TOKENS, PackagePipeline
from bsnap.core.services.reconciler import ServiceReconciler
from bsnap.ui.cli.render import Renderer

logger = logging.getLogger(__name__)

CHANNEL_OPTIONS: dict[str, Channel] = {
    "1": Channel.STABLE,
    "2": Channel.CANDIDATE,
    "3": Channel.BETA,
    "4": Channel.EDGE,
    "": Channel.STABLE,
}


def ask(text: str) -> str:
    """Prompt for one line; empty input is allowed."""
    return click.prompt(text, default="", show_default=False, prompt_suffix=": ")


def yes(answer: str) -> bool:
    return answer.strip().lower() in AFFIRMATIVE_TOKENS


class MenuApp:
    """Installer landing menu plus the service and package managers."""

    def __init__(
        self,
        renderer: Renderer,
        reconciler: ServiceReconciler,
        pipeline: PackagePipeline,
        bootstrap: SnapBootstrap,
        launcher: LauncherInstaller,
    ):
        self.ui = renderer
        self.reconciler = reconciler
        self.pipeline = pipeline
        self.bootstrap = bootstrap
        self.launcher = launcher

    def run(self) -> None:
        """Run until the user quits or input ends."""
        try:
            self.installer_menu()
        except click.Abort:
            click.echo()
            logger.debug("Input closed, leaving")

    # ── Installer (landing) ─────────────────────────────────────

    def installer_menu(self) -> None:
        while True:
            self.ui.header("BSnapD • Installer")
            click.echo(f"  Theme: {self.ui.theme.name}")
            click.echo(f"  Launcher: {self.launcher.path}")
            click.echo()
            click.echo("  1) Install/Update bsnap launcher")
            click.echo("  2) Manage snap services")
            click.echo("  3) Snap manager (list/search/install/remove)")
            click.echo("  q) Quit")
            click.echo()
            choice = ask("Choose").strip().lower()
            if choice == "1":
                self.ui.receipt(self.launcher.install())
                self.ui.pause()
            elif choice == "2":
                if self.ensure_snap():
                    self.service_manager()
            elif choice == "3":
                if self.ensure_snap():
                    self.package_manager()
            elif choice == "q":
                return
            else:
                self.ui.warn("Invalid option")
                self.ui.pause()

    def ensure_snap(self) -> bool:
        """Install snapd first if needed. False sends the user back."""
        if self.bootstrap.is_installed():
            return True
        self.ui.header("Snapd Installation")
        self.ui.warn("snap not detected. Installing now...")
        report = self.bootstrap.ensure()
        self.ui.info(f"Detected package manager: {report.package_manager}")
        if report.receipt is not None:
            self.ui.receipt(report.receipt)
        self.ui.pause()
        return report.ok

    def authorized(self) -> bool:
        """Ask for privileges before a spinner takes over the terminal."""
        result = self.pipeline.authorize()
        if result.ok:
            return True
        self.ui.err("Could not obtain administrator privileges.")
        self.ui.detail(result.diagnostic)
        self.ui.pause()
        return False

    # ── Service manager ─────────────────────────────────────────

    def service_manager(self) -> None:
        while True:
            self.ui.header("BSnapD • Snap Services Manager")
            click.echo("Services Status:")
            for ordinal, (service, state) in enumerate(self.reconciler.status_all(), start=1):
                click.echo(f"  {ordinal}) {service.name:<28} {self.ui.status_badges(state)}")
            click.echo("  r) Refresh")
            click.echo("  b) Back")
            click.echo()
            choice = ask("Select a service number, or option").strip().lower()
            if choice == "b":
                return
            if choice == "r":
                continue
            try:
                service = self.reconciler.describe(choice)
            except SelectionError as e:
                self.ui.warn(str(e))
                self.ui.pause()
                continue
            self.service_menu(service)

    def service_menu(self, service: ServiceDescriptor) -> None:
        while True:
            self.ui.header(f"Service: {service.name}")
            state = self.reconciler.status(service)
            click.echo(f"  Status: {self.ui.status_badges(state)}")
            click.echo()
            click.echo("  1) Turn ON (enable + start)")
            click.echo("  2) Turn OFF (stop + disable)")
            click.echo("  b) Back")
            click.echo()
            choice = ask("Choose").strip().lower()
            if choice == "1":
                self.ui.report(self.reconciler.turn_on(service))
                self.ui.pause()
            elif choice == "2":
                self.ui.report(self.reconciler.turn_off(service))
                self.ui.pause()
            elif choice == "b":
                return
            else:
                self.ui.warn("Invalid option")
                self.ui.pause()

    # ── Package manager ─────────────────────────────────────────

    def package_manager(self) -> None:
        while True:
            self.ui.header("BSnapD • Snap Manager")
            click.echo("  1) List installed snaps")
            click.echo("  2) Search and install snaps")
            click.echo("  3) Remove a snap")
            click.echo("  b) Back")
            click.echo()
            choice = ask("Choose").strip().lower()
            if choice == "1":
                self.list_installed()
            elif choice == "2":
                self.search_install()
            elif choice == "3":
                self.remove()
            elif choice == "b":
                self.pipeline.forget()
                return
            else:
                self.ui.warn("Invalid option")
                self.ui.pause()

    def list_installed(self) -> None:
        self.ui.header("Installed Snaps")
        with self.ui.busy("Listing installed snaps…"):
            outcome = self.pipeline.list_installed()
        if not outcome.ok or outcome.listing is None:
            self.ui.err("Could not list installed snaps.")
            self.ui.detail(outcome.error)
        elif not len(outcome.listing):
            self.ui.warn("No snaps installed.")
        else:
            self.ui.installed_table(outcome.listing)
        click.echo()
        self.ui.pause()

    def search_install(self) -> None:
        while True:
            self.ui.header("Search & Install")
            click.echo("Type a search term (e.g., 'vlc', 'spotify') or 'b' to go back.")
            click.echo()
            query = ask("Search").strip()
            if not query or query.lower() in BACK_TOKENS:
                return
            with self.ui.busy(f"Searching for {query!r}…"):
                outcome = self.pipeline.search(query)
            if outcome is None:
                return
            if not outcome.ok or outcome.results is None:
                self.ui.err("Search failed.")
                self.ui.detail(outcome.error)
                self.ui.pause()
                continue
            if outcome.results.empty:
                self.ui.warn(f"No results for '{outcome.results.query}'.")
                self.ui.pause()
                continue
            if not self.results_menu(outcome.results):
                return

    def results_menu(self, results: SearchResultSet) -> bool:
        """Pick from one result set. True means "search again"."""
        while True:
            self.ui.header(f"Results for: {results.query}")
            self.ui.search_table(results)
            click.echo()
            click.echo("Select a number to install, or 's' to search again, or 'b' to go back.")
            choice = self.pipeline.interpret(results, ask("Choice"))
            if choice.kind == "back":
                return False
            if choice.kind == "search_again":
                return True
            if choice.kind == "invalid":
                self.ui.warn(choice.reason)
                self.ui.pause()
                continue
            assert choice.hit is not None
            self.install_flow(choice.hit)

    def install_flow(self, hit: SearchHit) -> None:
        self.ui.header(f"Install: {hit.name}")
        click.echo("Options:")
        click.echo("  1) Install (stable)")
        click.echo("  2) Install (candidate)")
        click.echo("  3) Install (beta)")
        click.echo("  4) Install (edge)")
        click.echo("  c) Cancel")
        click.echo()
        pick = ask("Choose").strip().lower()
        if pick == "c":
            return
        channel = CHANNEL_OPTIONS.get(pick)
        if channel is None:
            self.ui.warn("Invalid option")
            self.ui.pause()
            return

        classic = yes(ask("Use classic confinement if required? (y/N)"))
        request = InstallRequest(package_name=hit.name, channel=channel, classic=classic)
        click.echo()
        self.ui.info(f"Installing: {' '.join(request.argv())}")
        if not self.authorized():
            return
        with self.ui.busy(f"Installing {hit.name}…"):
            receipt = self.pipeline.install(request)
        self.ui.receipt(receipt)
        click.echo()
        self.ui.pause()

    def remove(self) -> None:
        self.ui.header("Remove a Snap")
        with self.ui.busy("Listing installed snaps…"):
            outcome = self.pipeline.list_installed()
        if not outcome.ok or outcome.listing is None:
            self.ui.err("Could not list installed snaps.")
            self.ui.detail(outcome.error)
            self.ui.pause()
            return
        listing = outcome.listing
        if not len(listing):
            self.ui.warn("No snaps installed.")
            self.ui.pause()
            return

        self.ui.installed_table(listing, numbered=True)
        click.echo()
        choice = ask("Enter number to remove (or 'b' to back)")
        if choice.strip().lower() == "b":
            return
        try:
            package = self.pipeline.select_installed(listing, choice)
        except SelectionError as e:
            self.ui.warn(str(e))
            self.ui.pause()
            return

        answer = ask(f"Confirm remove '{package.name}'? (y/N)")
        if not yes(answer):
            receipt = self.pipeline.remove(package, answer)
        elif not self.authorized():
            return
        else:
            with self.ui.busy(f"Removing {package.name}…"):
                receipt = self.pipeline.remove(package, answer)
        self.ui.receipt(receipt)
        click.echo()
        self.ui.pause()
