"""Read-side entry points over an export directory.

Nothing is cached: every call walks the directory and rebuilds its answer
from the files present at that moment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from indexer.aggregator import group_projects, summarize_project
from indexer.decoder import load_report
from indexer.discovery import walk_report_files
from indexer.models import ProjectSummary, ScanRecord
from indexer.records import build_scan_record


class InvalidScanPath(ValueError):
    pass


class ScanNotFound(LookupError):
    pass


def collect_scans(export_dir: str | Path) -> list[ScanRecord]:
    root = Path(export_dir)
    records = []
    for path in walk_report_files(root):
        record = build_scan_record(root, path)
        if record is not None:
            records.append(record)
    records.sort(key=lambda record: record.path)
    return records


def list_scans(export_dir: str | Path) -> list[dict[str, Any]]:
    return [record.to_dict() for record in collect_scans(export_dir)]


def list_projects(export_dir: str | Path) -> list[ProjectSummary]:
    return group_projects(collect_scans(export_dir))


def get_project(export_dir: str | Path, project_name: str) -> ProjectSummary:
    return summarize_project(project_name, collect_scans(export_dir))


def resolve_scan_path(export_dir: str | Path, rel_path: str) -> Path:
    if not rel_path:
        raise InvalidScanPath("filename is required")
    if ".." in rel_path or "\x00" in rel_path:
        raise InvalidScanPath("invalid filename")
    if Path(rel_path).is_absolute():
        raise InvalidScanPath("invalid filename")

    root = Path(export_dir).resolve()
    candidate = (root / rel_path).resolve()
    if candidate == root or not candidate.is_relative_to(root):
        raise InvalidScanPath("invalid filename")
    return candidate


def get_scan_detail(export_dir: str | Path, rel_path: str) -> dict[str, Any]:
    path = resolve_scan_path(export_dir, rel_path)
    if not path.is_file():
        raise ScanNotFound(f"scan not found: {rel_path}")
    report = load_report(path)
    vulnerabilities = [vuln.to_dict() for vuln in report.iter_vulnerabilities()]
    return {
        "artifact_name": report.artifact_name,
        "artifact_type": report.artifact_type,
        "total_vulns": len(vulnerabilities),
        "vulnerabilities": vulnerabilities,
    }
