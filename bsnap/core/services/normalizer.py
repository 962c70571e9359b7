"""
Status normalizer — raw tool output to typed models.

Pure functions, no I/O. Everything that knows what systemctl or snap
print lives here; the rest of the package only sees models.

    systemctl is-active UNIT                    → parse_service_active
    systemctl show -p UnitFileState --value U   → parse_service_enabled
    snap find --help                            → supports_tabular
    snap find QUERY [--format=tsv]              → parse_search_rows
    snap list                                   → parse_installed_rows
"""

from __future__ import annotations

import logging
from typing import Literal

from bsnap.core.models.action import CommandResult
from bsnap.core.models.package import InstalledPackage, SearchHit
from bsnap.core.models.service import EnabledState

logger = logging.getLogger(__name__)

OutputFormat = Literal["tabular", "classic"]

# Option advertised by ``snap find --help`` when tab-separated output exists
TABULAR_OPTION = "--format"

# States reported by ``is-active`` that mean "running"
_ACTIVE_STATES = frozenset({"active", "reloading", "refreshing"})

# Suffixes snap appends to verified / starred publishers
_PUBLISHER_MARKS = "✓✪*"

_KNOWN_ENABLED = {state.value: state for state in EnabledState if state is not EnabledState.UNKNOWN}


# ── Services ────────────────────────────────────────────────────


def _first_word(text: str) -> str:
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line.split()[0]
    return ""


def parse_service_active(result: CommandResult) -> bool | None:
    """Interpret ``systemctl is-active``.

    Returns:
        True if running, False if not, None if the query itself failed
        (service manager missing, or no answer at all).
    """
    if not result.ran:
        return None
    state = _first_word(result.stdout)
    if not state:
        return True if result.ok else None
    return state in _ACTIVE_STATES


def parse_service_enabled(result: CommandResult) -> tuple[EnabledState, str]:
    """Interpret the unit file state.

    Known states map onto :class:`EnabledState`. Anything else
    (``enabled-runtime``, ``linked``, ``generated`` …) is returned
    verbatim next to ``UNKNOWN`` so it can be displayed as-is.
    A failed or empty query yields ``(UNKNOWN, "unknown")``.
    """
    if not result.ran:
        return EnabledState.UNKNOWN, "unknown"
    raw = _first_word(result.stdout)
    if not raw:
        return EnabledState.UNKNOWN, "unknown"
    state = _KNOWN_ENABLED.get(raw.lower())
    if state is not None:
        return state, state.value
    return EnabledState.UNKNOWN, raw


# ── Search ──────────────────────────────────────────────────────


def supports_tabular(help_text: str) -> bool:
    """Capability probe: does ``snap find`` advertise tab-separated output?"""
    return TABULAR_OPTION in help_text


def _split_publisher(raw: str) -> tuple[str, bool]:
    name = raw.rstrip(_PUBLISHER_MARKS)
    return name, name != raw


def _is_decoration(token: str) -> bool:
    return not token[:1].isalnum()


def _tabular_rows(raw: str) -> list[SearchHit]:
    hits: list[SearchHit] = []
    for line in raw.splitlines():
        fields = [f.strip() for f in line.split("\t")]
        if len(fields) < 2 or not fields[0]:
            continue
        fields += [""] * (5 - len(fields))
        publisher, verified = _split_publisher(fields[2])
        hits.append(SearchHit(
            name=fields[0],
            version=fields[1],
            publisher=publisher,
            channel=fields[3],
            verified=verified,
            summary="\t".join(fields[4:]).strip(),
        ))
    return hits


def _classic_rows(raw: str) -> list[SearchHit]:
    hits: list[SearchHit] = []
    header_seen = False
    for line in raw.splitlines():
        parts = line.split(None, 4)
        if not parts:
            continue
        if not header_seen:
            header_seen = True
            continue
        if _is_decoration(parts[0]):
            continue
        parts += [""] * (5 - len(parts))
        publisher, verified = _split_publisher(parts[2])
        hits.append(SearchHit(
            name=parts[0],
            version=parts[1],
            publisher=publisher,
            channel=parts[3],
            verified=verified,
            summary=parts[4].strip(),
        ))
    return hits


def parse_search_rows(
    raw: str,
    output_format: OutputFormat,
    cap: int,
) -> tuple[list[SearchHit], int]:
    """Parse ``snap find`` output into at most ``cap`` hits.

    Args:
        raw: The command's stdout.
        output_format: ``tabular`` (tab-separated, no header) or
            ``classic`` (columns with a header row, possibly decorated
            with separator lines).
        cap: Maximum number of rows kept.

    Returns:
        ``(hits, dropped)`` where ``dropped`` counts rows beyond the cap.
        Truncation is not an error.
    """
    rows = _tabular_rows(raw) if output_format == "tabular" else _classic_rows(raw)
    dropped = max(0, len(rows) - cap)
    if dropped:
        logger.debug("Search returned %d rows, keeping %d", len(rows), cap)
    return rows[:cap], dropped


# ── Installed ───────────────────────────────────────────────────


def parse_installed_rows(raw: str) -> list[InstalledPackage]:
    """Parse ``snap list`` (Name Version Rev Tracking Publisher Notes)."""
    packages: list[InstalledPackage] = []
    header_seen = False
    for line in raw.splitlines():
        parts = line.split(None, 5)
        if not parts:
            continue
        if not header_seen:
            header_seen = True
            continue
        if _is_decoration(parts[0]):
            continue
        parts += [""] * (6 - len(parts))
        publisher, _ = _split_publisher(parts[4])
        packages.append(InstalledPackage(
            name=parts[0],
            version=parts[1],
            revision=parts[2],
            tracking=parts[3],
            publisher=publisher,
            notes=parts[5].strip(),
        ))
    return packages
