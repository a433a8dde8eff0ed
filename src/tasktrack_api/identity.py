from __future__ import annotations

from typing import Iterable, Optional


# PUBLIC_INTERFACE
def normalize(raw: Optional[str]) -> str:
    """
    Map a submitted username to its canonical lookup key.

    The key is the trimmed, lowercased username. Empty or whitespace-only input
    yields '', which is never a valid key.
    """
    return (raw or "").strip().lower()


# PUBLIC_INTERFACE
def resolve_existing_key(raw: Optional[str], existing_keys: Iterable[str]) -> str:
    """
    Return the stored key matching `raw`, or '' when there is none.

    An exact canonical match wins. Otherwise the stored keys are scanned
    case-insensitively, so records saved before keys were normalized still resolve.
    """
    key = normalize(raw)
    if not key:
        return ""
    keys = list(existing_keys)
    if key in keys:
        return key
    for candidate in keys:
        if candidate.lower() == key:
            return candidate
    return ""
