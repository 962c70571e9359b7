"""
Package pipeline — search, select by ordinal, install, remove.

The pipeline owns the *current* result set and installed listing.
An ordinal is only ever resolved against the set it was displayed
from: a set that has been replaced (new search, new listing, or
``forget()``) is stale and every selection against it is rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from bsnap.adapters.snap import PackageToolClient
from bsnap.core.models.action import CommandResult, Receipt
from bsnap.core.models.package import (
    InstalledListing,
    InstalledOutcome,
    InstalledPackage,
    InstallRequest,
    SearchHit,
    SearchOutcome,
    SearchResultSet,
)
from bsnap.core.models.selection import SelectionError, resolve_ordinal

logger = logging.getLogger(__name__)

BACK_TOKENS = frozenset({"b"})
SEARCH_AGAIN_TOKENS = frozenset({"s", ""})
AFFIRMATIVE_TOKENS = frozenset({"y", "yes"})


@dataclass(frozen=True)
class Choice:
    """Interpretation of the user's input on the results screen."""

    kind: Literal["install", "search_again", "back", "invalid"]
    hit: SearchHit | None = None
    reason: str = ""


class PackagePipeline:
    """Search/select/install/remove against one package tool."""

    def __init__(self, client: PackageToolClient, cap: int = 25):
        if cap < 1:
            raise ValueError("cap must be at least 1")
        self._client = client
        self._cap = cap
        self._current: SearchResultSet | None = None
        self._listing: InstalledListing | None = None

    @property
    def cap(self) -> int:
        return self._cap

    @property
    def current(self) -> SearchResultSet | None:
        return self._current

    def forget(self) -> None:
        """Discard the current result set and installed listing."""
        self._current = None
        self._listing = None

    # ── Search ──────────────────────────────────────────────────

    def search(self, query: str) -> SearchOutcome | None:
        """Run a catalog search and make its result set current.

        Returns None without searching when the query is empty or a
        back token. Zero matches is a successful, empty outcome; a
        failing search command is an error outcome and clears the
        current set.
        """
        query = query.strip()
        if not query or query.lower() in BACK_TOKENS:
            return None

        self._current = None
        output_format = self._client.search_format()
        result, hits, dropped = self._client.search(query, output_format, self._cap)
        if not result.ok:
            logger.info("Search for %r failed: %s", query, result.diagnostic)
            return SearchOutcome(ok=False, error=result.diagnostic)

        self._current = SearchResultSet(
            query=query,
            hits=tuple(hits),
            output_format=output_format,
            dropped=dropped,
        )
        logger.debug("Search %r: %d hits (%d dropped)", query, len(hits), dropped)
        return SearchOutcome(ok=True, results=self._current)

    def select(self, results: SearchResultSet, text: str) -> SearchHit:
        """Resolve an ordinal against ``results``.

        Raises:
            SelectionError: For non-numbers, out-of-range ordinals, or
                a result set that is no longer current.
        """
        if self._current is None or results.token != self._current.token:
            raise SelectionError("These results are no longer current; search again")
        return resolve_ordinal(text, results.hits)

    def interpret(self, results: SearchResultSet, text: str) -> Choice:
        """Map input on the results screen to install/search-again/back/invalid.

        Leaving the results screen (back or search again) discards the
        current set.
        """
        token = text.strip().lower()
        if token in BACK_TOKENS:
            self._current = None
            return Choice("back")
        if token in SEARCH_AGAIN_TOKENS:
            self._current = None
            return Choice("search_again")
        try:
            return Choice("install", hit=self.select(results, text))
        except SelectionError as e:
            return Choice("invalid", reason=str(e))

    # ── Install ─────────────────────────────────────────────────

    def authorize(self) -> CommandResult:
        """Acquire privileges before an install or remove is started."""
        return self._client.authorize()

    def install(self, request: InstallRequest) -> Receipt:
        """Issue exactly one install call. The current result set is kept."""
        result = self._client.install(request)
        label = f"{request.package_name} ({request.channel.value})"
        if result.ok:
            return Receipt.success("install", request.package_name, f"Installed {label}.")
        return Receipt.failure(
            "install", request.package_name, f"Failed to install {label}.",
            detail=result.diagnostic,
        )

    # ── Installed / remove ──────────────────────────────────────

    def list_installed(self) -> InstalledOutcome:
        """Query installed snaps and make the listing current."""
        self._listing = None
        result, packages = self._client.list_installed()
        if not result.ok:
            return InstalledOutcome(ok=False, error=result.diagnostic)
        self._listing = InstalledListing(packages=tuple(packages))
        return InstalledOutcome(ok=True, listing=self._listing)

    def select_installed(self, listing: InstalledListing, text: str) -> InstalledPackage:
        """Resolve an ordinal against the current installed listing."""
        if self._listing is None or listing.token != self._listing.token:
            raise SelectionError("This list is no longer current; list again")
        return resolve_ordinal(text, listing.packages)

    def remove(self, package: InstalledPackage, confirmation: str) -> Receipt:
        """Remove ``package`` only after an explicit affirmative answer.

        Anything but ``y``/``yes`` (including empty input) cancels
        without calling the package tool.
        """
        if confirmation.strip().lower() not in AFFIRMATIVE_TOKENS:
            return Receipt.unchanged("remove", package.name, "Cancelled.")

        result = self._client.remove(package.name)
        self._listing = None
        if result.ok:
            return Receipt.success("remove", package.name, f"Removed {package.name}.")
        return Receipt.failure(
            "remove", package.name, f"Failed to remove {package.name}.",
            detail=result.diagnostic,
        )
