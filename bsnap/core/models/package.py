"""
Package models — search results, install requests, installed snaps.

Result sets and listings carry a random ``token``. Ordinals typed by
the user are only ever resolved against the set that is current in the
pipeline; once a set is replaced its token no longer matches.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def _new_token() -> str:
    return uuid.uuid4().hex


class Channel(str, Enum):
    """Release track a snap is installed from."""

    STABLE = "stable"
    CANDIDATE = "candidate"
    BETA = "beta"
    EDGE = "edge"


class SearchHit(BaseModel):
    """One row of a catalog search."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    publisher: str = ""
    channel: str = ""
    verified: bool = False
    summary: str = ""


class SearchResultSet(BaseModel):
    """Bounded, ordered result of one search call."""

    model_config = ConfigDict(frozen=True)

    query: str
    hits: tuple[SearchHit, ...] = ()
    output_format: Literal["tabular", "classic"] = "classic"
    dropped: int = 0                # rows cut off by the result cap
    token: str = Field(default_factory=_new_token)

    def __len__(self) -> int:
        return len(self.hits)

    @property
    def empty(self) -> bool:
        return not self.hits

    def numbered(self) -> list[tuple[int, SearchHit]]:
        """Hits paired with their 1-based ordinals."""
        return list(enumerate(self.hits, start=1))


class InstallRequest(BaseModel):
    """Parameters of one install attempt. Never persisted."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    channel: Channel = Channel.STABLE
    classic: bool = False

    def argv(self) -> list[str]:
        """Arguments for ``snap install``."""
        args = ["snap", "install", self.package_name, f"--channel={self.channel.value}"]
        if self.classic:
            args.append("--classic")
        return args


class InstalledPackage(BaseModel):
    """Read-only projection of one installed snap."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    revision: str = ""
    tracking: str = ""
    publisher: str = ""
    notes: str = ""


class InstalledListing(BaseModel):
    """Installed snaps as displayed to the user for selection."""

    model_config = ConfigDict(frozen=True)

    packages: tuple[InstalledPackage, ...] = ()
    token: str = Field(default_factory=_new_token)

    def __len__(self) -> int:
        return len(self.packages)

    def numbered(self) -> list[tuple[int, InstalledPackage]]:
        return list(enumerate(self.packages, start=1))


class SearchOutcome(BaseModel):
    """Search call result: an (possibly empty) set, or an error."""

    ok: bool
    results: SearchResultSet | None = None
    error: str = ""


class InstalledOutcome(BaseModel):
    """``snap list`` result: a listing, or an error."""

    ok: bool
    listing: InstalledListing | None = None
    error: str = ""
