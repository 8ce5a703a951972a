"""Normalization of loosely typed node id filters.

Callers pass ids as a number, a list, or a string such as ``"12,7;3 9"``
where any run of non-digits separates ids. Anything that is not a positive
integer within the database's signed 64-bit range is dropped silently;
this is normalization, not validation.
"""

from __future__ import annotations

import re
from typing import Any

# Largest id a signed BIGINT (and SQLite INTEGER) column can hold
MAX_NODE_ID = 2**63 - 1

_NON_DIGITS = re.compile(r"\D+")


def _ids_from(value: Any) -> set[int]:
    if value is None or isinstance(value, bool):
        return set()
    if isinstance(value, int):
        return {value}
    if isinstance(value, float):
        return {int(value)} if value.is_integer() else set()
    if isinstance(value, str):
        return {int(token) for token in _NON_DIGITS.split(value) if token}
    if isinstance(value, list | tuple | set | frozenset):
        ids: set[int] = set()
        for item in value:
            ids |= _ids_from(item)
        return ids
    return set()


def parse_candidate_ids(*values: Any) -> set[int]:
    """Merge every value into one set of positive node ids.

    Example:
        >>> sorted(parse_candidate_ids("12,7;3 9", [7, "40"], 5.0, None))
        [3, 5, 7, 9, 12, 40]
        >>> parse_candidate_ids("abc", 0, -4, 4.5, "99999999999999999999")
        set()
    """
    merged: set[int] = set()
    for value in values:
        merged |= _ids_from(value)
    return {i for i in merged if 0 < i <= MAX_NODE_ID}


__all__ = ["MAX_NODE_ID", "parse_candidate_ids"]
