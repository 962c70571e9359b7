"""
Settings model — the validated contents of the config file.

Every field has a default, so an absent config file yields a fully
working configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from bsnap.core.models.service import ServiceDescriptor

ThemeName = Literal["dark", "light", "mono", "hi-contrast"]

DEFAULT_SERVICES = ("snapd.socket", "snapd.apparmor.service")


class SearchSettings(BaseModel):
    """Search result bounds."""

    result_cap: int = Field(default=25, ge=1, le=100)


class LauncherSettings(BaseModel):
    """Where the launcher script is installed."""

    path: str = "/usr/local/bin/bsnap"


class Settings(BaseModel):
    """Root configuration."""

    theme: ThemeName = "dark"
    services: list[str] = Field(default_factory=lambda: list(DEFAULT_SERVICES))
    search: SearchSettings = Field(default_factory=SearchSettings)
    launcher: LauncherSettings = Field(default_factory=LauncherSettings)

    @field_validator("services")
    @classmethod
    def _check_services(cls, value: list[str]) -> list[str]:
        names = [v.strip() for v in value]
        if not names or any(not n for n in names):
            raise ValueError("services must be a non-empty list of unit names")
        if len(set(names)) != len(names):
            raise ValueError("services must be unique")
        return names

    def service_descriptors(self) -> tuple[ServiceDescriptor, ...]:
        """The configured units as an immutable tuple."""
        return tuple(ServiceDescriptor(name=n) for n in self.services)
