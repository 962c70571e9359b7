"""
Renderer — every line the menus print goes through here.

Takes an explicit Theme. Status badges, result tables, receipts and
the busy indicator live here so the core never formats text.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from contextlib import contextmanager

import click
from rich.console import Console

from bsnap.core.models.action import Receipt
from bsnap.core.models.package import InstalledListing, SearchResultSet
from bsnap.core.models.service import EnabledState, ReconcileReport, ServiceState
from bsnap.ui.cli.theme import Theme

BORDER = "=" * 60
COMPACT_WIDTH = 80

_ENABLED_BADGES: dict[EnabledState, tuple[str, str]] = {
    EnabledState.ENABLED: ("ENABLED", "badge_green"),
    EnabledState.DISABLED: ("DISABLED", "badge_red"),
    EnabledState.STATIC: ("STATIC", "badge_yellow"),
    EnabledState.INDIRECT: ("INDIRECT", "badge_yellow"),
    EnabledState.MASKED: ("MASKED", "badge_red"),
}


class Renderer:
    """Themed terminal output."""

    def __init__(self, theme: Theme, console: Console | None = None):
        self.theme = theme
        self._console = console or Console(no_color=not theme.color, highlight=False)

    # ── Primitives ──────────────────────────────────────────────

    def style(self, text: str, role: str) -> str:
        kwargs = self.theme.style_for(role)
        return click.style(text, **kwargs) if kwargs else text

    def line(self, text: str = "", role: str | None = None) -> None:
        click.echo(self.style(text, role) if role else text)

    def ok(self, text: str) -> None:
        self.line(text, "ok")

    def warn(self, text: str) -> None:
        self.line(text, "warn")

    def err(self, text: str) -> None:
        self.line(text, "err")

    def info(self, text: str) -> None:
        self.line(text, "info")

    def header(self, title: str) -> None:
        click.clear()
        self.line(BORDER, "head")
        self.line(f"  {title}", "head")
        self.line(BORDER, "head")

    def detail(self, text: str) -> None:
        """Raw tool diagnostics, indented and unstyled."""
        for raw in text.strip().splitlines():
            click.echo(f"   │ {raw}")

    def pause(self) -> None:
        click.pause("Press Enter to continue...")

    @property
    def compact(self) -> bool:
        return shutil.get_terminal_size((COMPACT_WIDTH, 24)).columns < COMPACT_WIDTH

    @contextmanager
    def busy(self, message: str) -> Iterator[None]:
        """Spinner around a blocking call; always stopped on exit."""
        if not self._console.is_terminal:
            yield
            return
        with self._console.status(message, spinner="dots"):
            yield

    # ── Badges ──────────────────────────────────────────────────

    def badge(self, label: str, role: str) -> str:
        return self.style(f" {label} ", role)

    def badge_active(self, active: bool | None) -> str:
        if active is None:
            return self.badge("UNKNOWN", "badge_yellow")
        return self.badge("ACTIVE", "badge_green") if active else self.badge("INACTIVE", "badge_red")

    def badge_enabled(self, state: ServiceState) -> str:
        known = _ENABLED_BADGES.get(state.enabled)
        if known:
            return self.badge(*known)
        return self.badge(state.enabled_raw.upper(), "badge_yellow")

    def status_badges(self, state: ServiceState) -> str:
        active, enabled = self.badge_active(state.active), self.badge_enabled(state)
        if self.compact:
            return f"{active} {enabled}"
        return f"[ {active} | {enabled} ]"

    # ── Outcomes ────────────────────────────────────────────────

    def receipt(self, receipt: Receipt) -> None:
        if receipt.status == "ok":
            self.ok(receipt.message)
        elif receipt.status == "unchanged":
            self.warn(receipt.message)
        else:
            self.err(receipt.message)
            if receipt.detail:
                self.detail(receipt.detail)

    def report(self, report: ReconcileReport) -> None:
        for phase in report.phases:
            self.receipt(phase)

    # ── Tables ──────────────────────────────────────────────────

    def search_table(self, results: SearchResultSet) -> None:
        self.line(f"{'#':<4} {'Name':<30} {'Version':<18} {'Channel':<12} {'Publisher':<25}", "bold")
        self.line("-" * 92)
        for ordinal, hit in results.numbered():
            publisher = hit.publisher + ("*" if hit.verified else "")
            click.echo(
                f"{ordinal:<4} {hit.name:<30} {hit.version:<18} {hit.channel:<12} {publisher:<25}"
            )
        if results.dropped:
            self.info(f"(showing first {len(results)}; {results.dropped} more not shown)")

    def installed_table(self, listing: InstalledListing, numbered: bool = False) -> None:
        prefix = f"{'#':<4} " if numbered else ""
        self.line(
            f"{prefix}{'Name':<28} {'Version':<16} {'Rev':<10} {'Tracking':<16} {'Publisher':<20}",
            "bold",
        )
        self.line("-" * (94 + len(prefix)))
        for ordinal, pkg in listing.numbered():
            prefix = f"{ordinal:<4} " if numbered else ""
            click.echo(
                f"{prefix}{pkg.name:<28} {pkg.version:<16} {pkg.revision:<10} "
                f"{pkg.tracking:<16} {pkg.publisher:<20}"
            )
