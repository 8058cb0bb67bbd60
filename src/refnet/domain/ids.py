"""User identifier rules.

An identifier is any non-empty string that is not all whitespace.
Identifiers are compared verbatim: no trimming or case folding is applied,
so ``"alice"`` and ``" alice"`` are different users.
"""

from __future__ import annotations

from typing import Any


def is_valid_user_id(user_id: Any) -> bool:
    """Return True if *user_id* is acceptable as a new user identifier."""
    return isinstance(user_id, str) and user_id.strip() != ""


def is_present_id(user_id: Any) -> bool:
    """Return True if *user_id* is a non-empty string.

    Referral endpoints only need to be non-empty; whitespace-only ids can
    never exist in the graph and are reported as unknown users instead.
    """
    return isinstance(user_id, str) and user_id != ""
