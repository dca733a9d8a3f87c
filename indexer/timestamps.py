"""Scan times embedded in report file names.

Operators backfill historical scans by naming files
``<name>-YYYYMMDD-HHMMSS.json``; the embedded value wins over the file's
modification time, which is usually just the upload time.
"""

from __future__ import annotations

import os
import posixpath
from datetime import datetime
from pathlib import PurePath

REPORT_EXTENSION = ".json"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
# "-" + 8 digits + "-" + 6 digits
TIMESTAMP_SUFFIX_LENGTH = 16


def _is_digits(value: str) -> bool:
    return all("0" <= char <= "9" for char in value)


def split_timestamp_suffix(name: str) -> tuple[str, str | None]:
    """Split ``name`` into ``(stem, "YYYYMMDD-HHMMSS")``.

    Returns ``(name, None)`` when no well-formed suffix is present. A name made
    of nothing but the suffix is left alone.
    """
    if len(name) <= TIMESTAMP_SUFFIX_LENGTH:
        return name, None
    suffix = name[-TIMESTAMP_SUFFIX_LENGTH:]
    if suffix[0] != "-" or suffix[9] != "-":
        return name, None
    date_part, time_part = suffix[1:9], suffix[10:]
    if not (_is_digits(date_part) and _is_digits(time_part)):
        return name, None
    return name[:-TIMESTAMP_SUFFIX_LENGTH], f"{date_part}-{time_part}"


def strip_timestamp_suffix(name: str) -> str:
    return split_timestamp_suffix(name)[0]


def strip_report_extension(rel_path: str | PurePath) -> str:
    normalized = str(rel_path).replace(os.sep, "/")
    if normalized.endswith(REPORT_EXTENSION):
        return normalized[: -len(REPORT_EXTENSION)]
    return normalized


def resolve_scan_time(rel_path: str | PurePath, fallback: datetime) -> datetime:
    base_path = strip_report_extension(rel_path)
    if not base_path:
        return fallback
    _, raw = split_timestamp_suffix(posixpath.basename(base_path))
    if raw is None:
        return fallback
    try:
        parsed = datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError:
        return fallback
    # Naive values are interpreted in the local zone.
    return parsed.astimezone()
