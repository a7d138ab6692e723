from __future__ import annotations

from typing import Optional


def normalize_address(address: Optional[str]) -> str:
    if not address:
        return ""
    return address.strip().lower()


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two wallet addresses after normalization.

    Empty addresses never match, so a missing organizer on either side is rejected.
    """
    na, nb = normalize_address(a), normalize_address(b)
    return bool(na) and na == nb
