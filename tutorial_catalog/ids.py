"""
Identifier normalisation for records, sections and favourites.
"""

from typing import Any, Optional


def normalize_id(value: Any) -> str:
    """Return the canonical (string) form of a record or section id.

    Integers and strings are accepted; ``1`` and ``"1"`` compare equal
    once normalised. Booleans are rejected because ``True`` would
    otherwise silently become ``"True"``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"invalid identifier: {value!r}")
    return str(value).strip()


def coerce_id(value: Any) -> Optional[str]:
    """Like ``normalize_id`` but returns ``None`` instead of raising."""
    try:
        return normalize_id(value)
    except ValueError:
        return None
