"""
Pytest configuration and shared fixtures for dashboard tests.
"""
import json
import os
import tempfile

import pytest

# Settings are read when the app module is imported
_default_export = tempfile.mkdtemp(prefix="export-")
os.environ.setdefault("EXPORT_DIR", _default_export)
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000"

from fastapi.testclient import TestClient  # noqa: E402

from dashboard.app import app  # noqa: E402


def _report(artifact_name, severities):
    return {
        "SchemaVersion": 2,
        "ArtifactName": artifact_name,
        "ArtifactType": "container_image",
        "Results": [
            {
                "Target": "alpine 3.19",
                "Vulnerabilities": [
                    {
                        "VulnerabilityID": f"CVE-2025-{index:04d}",
                        "PkgName": "openssl",
                        "InstalledVersion": "3.1.0",
                        "FixedVersion": "3.1.4",
                        "Severity": severity,
                        "Title": "openssl issue",
                        "Description": "desc",
                        "PrimaryURL": f"https://avd.aquasec.com/nvd/cve-2025-{index:04d}",
                    }
                    for index, severity in enumerate(severities)
                ],
            }
        ],
    }


@pytest.fixture
def export_dir(tmp_path, monkeypatch):
    """
    Export tree with two versions of acme/api, a flat acme-web report and an
    undecodable file; EXPORT_DIR points at it for the duration of the test.
    """
    root = tmp_path / "export"
    files = {
        "acme/api-20250101-000000.json": _report("acme-api:1.0.0", ["CRITICAL", "HIGH"]),
        "acme/api-20250201-000000.json": _report("acme-api:1.1.0", ["HIGH"]),
        "acme-web-20250105-000000.json": _report("acme-web:latest", ["MEDIUM", "LOW"]),
    }
    for rel_path, payload in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
    (root / "broken.json").write_text("{", encoding="utf-8")

    monkeypatch.setenv("EXPORT_DIR", str(root))
    return root


@pytest.fixture
def client():
    return TestClient(app)

