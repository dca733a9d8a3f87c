"""
Shared fixtures for building export directories on disk.
"""
import json
import os
from datetime import datetime
from pathlib import Path

import pytest


def make_report(artifact_name: str = "", severities=(), artifact_type: str = "container_image") -> dict:
    vulnerabilities = [
        {
            "VulnerabilityID": f"CVE-2024-{1000 + index}",
            "PkgName": f"pkg{index}",
            "InstalledVersion": "1.0.0",
            "FixedVersion": "1.0.1",
            "Severity": severity,
            "Title": f"Issue {index}",
            "Description": "desc",
        }
        for index, severity in enumerate(severities)
    ]
    return {
        "SchemaVersion": 2,
        "ArtifactName": artifact_name,
        "ArtifactType": artifact_type,
        "Results": [{"Target": "debian 12", "Class": "os-pkgs", "Type": "debian", "Vulnerabilities": vulnerabilities}],
    }


@pytest.fixture
def export_root(tmp_path) -> Path:
    root = tmp_path / "export"
    root.mkdir()
    return root


@pytest.fixture
def write_report(export_root):
    """Factory writing a report under the export root with a pinned mtime."""

    def _write(rel_path: str, artifact_name: str = "", severities=(), mtime: datetime | None = None, raw: str | None = None) -> Path:
        path = export_root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if raw is None:
            raw = json.dumps(make_report(artifact_name, severities))
        path.write_text(raw, encoding="utf-8")
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _write
