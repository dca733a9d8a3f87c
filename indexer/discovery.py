from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from indexer.timestamps import REPORT_EXTENSION

LOGGER = logging.getLogger(__name__)


class DirectoryUnreadable(RuntimeError):
    pass


def _log_skipped(exc: OSError) -> None:
    LOGGER.debug("Skipping unreadable entry %s: %s", exc.filename, exc)


def _is_utf8_name(name: str) -> bool:
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        LOGGER.debug("Skipping entry with a non UTF-8 name: %r", name)
        return False
    return True


def _walk(root: Path, extension: str) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_skipped):
        # names that cannot be reported back are never descended into
        dirnames[:] = [name for name in dirnames if _is_utf8_name(name)]
        for name in filenames:
            if not name.endswith(extension) or not _is_utf8_name(name):
                continue
            path = Path(dirpath, name)
            try:
                if not path.is_file():
                    continue
            except OSError as exc:
                _log_skipped(exc)
                continue
            yield path


def walk_report_files(root: str | Path, extension: str = REPORT_EXTENSION) -> Iterator[Path]:
    """Lazily yield every report file beneath ``root``, at any depth.

    The root is opened up front so an unreadable export directory fails the
    caller immediately. Enumeration order is whatever the filesystem returns.
    """
    root = Path(root)
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise DirectoryUnreadable(f"Cannot read export directory {root}: {exc}") from exc
    return _walk(root, extension)
