"""
Ordinal selection — mapping typed input back to a displayed item.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class SelectionError(ValueError):
    """Raised when user input does not name an item of the current list."""


def resolve_ordinal(text: str, items: Sequence[T]) -> T:
    """Resolve a 1-based ordinal typed by the user.

    Args:
        text: Raw user input (surrounding whitespace is ignored).
        items: The exact sequence that was displayed.

    Returns:
        The item at that ordinal.

    Raises:
        SelectionError: If ``text`` is not a number in ``1..len(items)``.
    """
    text = text.strip()
    if not items:
        raise SelectionError("Nothing to select")
    if not (text.isascii() and text.isdigit()):
        raise SelectionError(f"Invalid input: {text!r}")
    ordinal = int(text)
    if not 1 <= ordinal <= len(items):
        raise SelectionError(f"Invalid selection: {ordinal} (choose 1-{len(items)})")
    return items[ordinal - 1]
