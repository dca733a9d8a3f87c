"""Ordering of the scans that belong to one image.

Two different questions are answered here and must not be confused:

* ``rank_scans`` orders by tag-as-version, then recency. Its head is the
  image's *current* state.
* ``latest_scan_time`` is purely chronological and drives "last scan".

A newer scan of an older tag advances the latter without becoming current.
"""

from __future__ import annotations

import re
from datetime import datetime
from functools import cmp_to_key
from typing import Iterable

from indexer.models import ScanRecord

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _cmp(left, right) -> int:
    return (left > right) - (left < right)


def _as_int(part: str | None) -> int | None:
    if part is None or not _INTEGER.fullmatch(part):
        return None
    return int(part)


def compare_version_tags(left: str, right: str) -> int:
    """Return -1, 0 or 1 as ``left`` is older than, equal to or newer than ``right``.

    Components are compared numerically when both parse as integers and as
    strings otherwise; a missing trailing component sorts as the empty string.
    """
    if left == right:
        return 0
    if not left:
        return -1
    if not right:
        return 1

    left_parts = left.removeprefix("v").split(".")
    right_parts = right.removeprefix("v").split(".")
    for index in range(max(len(left_parts), len(right_parts))):
        left_part = left_parts[index] if index < len(left_parts) else None
        right_part = right_parts[index] if index < len(right_parts) else None
        left_num, right_num = _as_int(left_part), _as_int(right_part)
        if left_num is not None and right_num is not None:
            result = _cmp(left_num, right_num)
        else:
            result = _cmp(left_part or "", right_part or "")
        if result:
            return result
    return 0


def compare_scans(left: ScanRecord, right: ScanRecord) -> int:
    """Comparator placing the more relevant scan first (negative = ``left`` first)."""
    if left.tag and right.tag:
        result = -compare_version_tags(left.tag, right.tag)
        if result:
            return result
    elif left.tag:
        return -1
    elif right.tag:
        return 1

    result = _cmp(right.timestamp, left.timestamp)
    if result:
        return result
    # keeps the ordering independent of filesystem enumeration order
    return _cmp(left.path, right.path)


def rank_scans(records: Iterable[ScanRecord]) -> list[ScanRecord]:
    # compare_version_tags is not transitive across mixed numeric and string
    # components (10 > 9 > 1a > 10); callers pass records pre-sorted by path
    # so such cycles still resolve the same way on every run.
    return sorted(records, key=cmp_to_key(compare_scans))


def latest_scan_time(records: Iterable[ScanRecord]) -> datetime | None:
    return max((record.timestamp for record in records), default=None)
