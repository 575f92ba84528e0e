"""Case-insensitive substring search over page bodies."""
from __future__ import annotations

from typing import Optional


def contains_query(content: Optional[str], query: str) -> bool:
    """Return True when *query* occurs anywhere in *content*, ignoring case.

    Plain substring semantics: ``"art"`` matches ``"start"``. Missing content
    never matches.
    """
    if not content:
        return False
    return query.lower() in content.lower()
