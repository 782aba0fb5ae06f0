"""Payee/memo resolution for bank statement lines."""
from __future__ import annotations

import re
from typing import Optional, Tuple

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(value: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def is_truncated_name(name: str, memo: str) -> bool:
    """True when ``memo`` starts with ``name`` ignoring case and spacing.

    Banks often cut NAME to a fixed width while MEMO holds the full payee.
    """
    normalized_name = collapse_whitespace(name).casefold()
    normalized_memo = collapse_whitespace(memo).casefold()
    if not normalized_name or not normalized_memo:
        return False
    return normalized_memo.startswith(normalized_name)


def normalize_payee(raw_name: Optional[str], raw_memo: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Resolve the payee and memo of a statement line from NAME and MEMO.

    * blank NAME: MEMO becomes the payee, no memo;
    * NAME is a (case-insensitive) prefix of MEMO: MEMO becomes the payee;
    * otherwise NAME is the payee and MEMO stays the memo.

    Returns ``(None, ...)`` when no payee can be derived.
    """
    if not raw_name or not raw_name.strip() or (raw_memo and is_truncated_name(raw_name, raw_memo)):
        payee, memo = raw_memo, None
    else:
        payee, memo = raw_name, raw_memo

    payee = _clean(payee)
    if payee is None:
        return None, None
    return payee, _clean(memo)
