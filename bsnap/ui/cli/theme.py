"""
Color themes — an explicit value built once at startup.

A Theme maps semantic roles (ok, warn, head, badge_green …) to
``click.style`` keyword arguments. It is handed to the Renderer; no
module reads color settings from global state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

THEME_NAMES = ("dark", "light", "mono", "hi-contrast")

Style = dict[str, Any]


@dataclass(frozen=True)
class Theme:
    """Named set of styles. ``color=False`` renders plain text."""

    name: str
    color: bool = True
    styles: Mapping[str, Style] = field(default_factory=dict)

    def style_for(self, role: str) -> Style:
        if not self.color:
            return {}
        return dict(self.styles.get(role, {}))


_PALETTES: dict[str, dict[str, Style]] = {
    "dark": {
        "bold": {"bold": True},
        "ok": {"fg": "green"},
        "warn": {"fg": "yellow"},
        "err": {"fg": "red"},
        "info": {"fg": "cyan"},
        "head": {"fg": 81},
        "badge_green": {"bg": 22, "fg": 255},
        "badge_red": {"bg": 52, "fg": 255},
        "badge_yellow": {"bg": 178, "fg": 0},
    },
    "light": {
        "bold": {"bold": True},
        "ok": {"fg": "green"},
        "warn": {"fg": "yellow"},
        "err": {"fg": "red"},
        "info": {"fg": "blue"},
        "head": {"fg": "magenta"},
        "badge_green": {"bg": 120, "fg": 0},
        "badge_red": {"bg": 210, "fg": 0},
        "badge_yellow": {"bg": 229, "fg": 0},
    },
    "hi-contrast": {
        "bold": {"bold": True},
        "ok": {"fg": "green", "bold": True},
        "warn": {"fg": "yellow", "bold": True},
        "err": {"fg": "red", "bold": True},
        "info": {"fg": "cyan", "bold": True},
        "head": {"fg": "white", "bold": True},
        "badge_green": {"bg": "green", "fg": "black", "bold": True},
        "badge_red": {"bg": "red", "fg": "bright_white", "bold": True},
        "badge_yellow": {"bg": "yellow", "fg": "black", "bold": True},
    },
}


def color_supported(environ: Mapping[str, str]) -> bool:
    """False when NO_COLOR is set or the terminal is dumb/unknown."""
    if environ.get("NO_COLOR"):
        return False
    return environ.get("TERM", "dumb") not in ("", "dumb")


def get_theme(name: str, environ: Mapping[str, str] | None = None) -> Theme:
    """Build the theme for ``name``, downgrading to mono without color support.

    Raises:
        ValueError: For an unknown theme name.
    """
    if name not in THEME_NAMES:
        raise ValueError(f"Unknown theme {name!r}. Valid: {', '.join(THEME_NAMES)}")
    if name == "mono" or (environ is not None and not color_supported(environ)):
        return Theme(name="mono", color=False)
    return Theme(name=name, styles=_PALETTES[name])
