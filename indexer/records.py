from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from indexer.decoder import MalformedReport, load_report
from indexer.identity import resolve_identity
from indexer.models import RawReport, ScanRecord
from indexer.timestamps import resolve_scan_time

LOGGER = logging.getLogger(__name__)

DEFAULT_SEVERITY = "UNKNOWN"


def severity_histogram(report: RawReport) -> dict[str, int]:
    counts: dict[str, int] = {}
    for vuln in report.iter_vulnerabilities():
        severity = (vuln.severity or DEFAULT_SEVERITY).upper()
        counts[severity] = counts.get(severity, 0) + 1
    return counts


def relative_report_path(root: Path, path: Path) -> str:
    return os.path.relpath(path, root).replace(os.sep, "/")


def build_scan_record(root: str | Path, path: str | Path) -> ScanRecord | None:
    """Build the record for one report file.

    Returns ``None`` only when the file vanished before it could be stat'ed.
    A body that cannot be decoded still yields a record, resolved from the
    path alone and carrying an empty histogram.
    """
    root, path = Path(root), Path(path)
    try:
        info = path.stat()
    except OSError as exc:
        LOGGER.debug("Skipping %s: %s", path, exc)
        return None

    rel_path = relative_report_path(root, path)
    modified_at = datetime.fromtimestamp(info.st_mtime).astimezone()

    artifact_name = ""
    histogram: dict[str, int] = {}
    try:
        report = load_report(path)
    except MalformedReport as exc:
        LOGGER.warning("Could not decode report %s: %s", rel_path, exc)
    else:
        artifact_name = report.artifact_name
        histogram = severity_histogram(report)

    identity = resolve_identity(artifact_name, rel_path)
    return ScanRecord(
        path=rel_path,
        size=info.st_size,
        timestamp=resolve_scan_time(rel_path, modified_at),
        artifact_name=artifact_name,
        project=identity.project,
        image=identity.image,
        tag=identity.tag,
        severity_histogram=histogram,
    )
