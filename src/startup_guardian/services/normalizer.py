"""Query normalization.

Turns free-text user input into the canonical form used as a cache key.
"""

from __future__ import annotations


def normalize_query(raw: str) -> str:
    """Trim surrounding whitespace and lower-case *raw*.

    Total and idempotent.  The empty string is a valid (degenerate) key;
    rejecting empty searches is the caller's concern.

    >>> normalize_query("  Stripe ")
    'stripe'
    """
    return raw.strip().lower()
