"""Tests for the scan dashboard HTTP surface."""

from __future__ import annotations

import os


def test_index_banner(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text.startswith("Trivy Dashboard backend is running.")


def test_list_scans_uses_camel_case(client, export_dir):
    resp = client.get("/api/scans")
    assert resp.status_code == 200
    scans = resp.json()
    assert [scan["filename"] for scan in scans] == [
        "acme-web-20250105-000000.json",
        "acme/api-20250101-000000.json",
        "acme/api-20250201-000000.json",
        "broken.json",
    ]
    first = scans[1]
    assert first["artifactName"] == "acme-api:1.0.0"
    assert first["projectName"] == "acme"
    assert first["imageName"] == "api"
    assert first["tag"] == "1.0.0"
    assert first["totalVulns"] == 2
    assert first["severityCount"] == {"CRITICAL": 1, "HIGH": 1}
    assert first["grade"] == "C"
    assert first["modifiedAt"].startswith("2025-01-01T00:00:00")
    # undecodable and unresolvable, but still listed
    assert scans[3]["imageName"] == ""
    assert scans[3]["totalVulns"] == 0


def test_list_projects(client, export_dir):
    resp = client.get("/api/projects")
    assert resp.status_code == 200
    projects = resp.json()
    assert len(projects) == 1
    acme = projects[0]
    assert acme["projectName"] == "acme"
    assert acme["totalScans"] == 3
    assert acme["totalVulns"] == 3
    assert acme["severityCount"] == {"HIGH": 1, "MEDIUM": 1, "LOW": 1}
    assert acme["grade"] == "A"
    assert acme["lastScan"].startswith("2025-02-01T00:00:00")
    assert [image["imageName"] for image in acme["images"]] == ["api", "web"]


def test_project_detail_orders_scans_by_version(client, export_dir):
    resp = client.get("/api/projects/acme")
    assert resp.status_code == 200
    api = resp.json()["images"][0]
    assert api["totalVulns"] == 1
    assert [scan["tag"] for scan in api["scans"]] == ["1.1.0", "1.0.0"]


def test_unknown_project_is_empty(client, export_dir):
    resp = client.get("/api/projects/nope")
    assert resp.status_code == 200
    body = resp.json()
    assert body["projectName"] == "nope"
    assert body["totalScans"] == 0
    assert body["totalVulns"] == 0
    assert body["images"] == []
    assert body["lastScan"] is None


def test_scan_detail(client, export_dir):
    resp = client.get("/api/scans/acme/api-20250101-000000.json")
    assert resp.status_code == 200
    body = resp.json()
    assert body["artifactName"] == "acme-api:1.0.0"
    assert body["artifactType"] == "container_image"
    assert body["totalVulns"] == 2
    vuln = body["vulnerabilities"][0]
    assert vuln["VulnerabilityID"] == "CVE-2025-0000"
    assert vuln["Severity"] == "CRITICAL"
    assert vuln["PrimaryURL"].startswith("https://avd.aquasec.com/")


def test_scan_detail_rejects_path_escape(client, export_dir):
    resp = client.get("/api/scans/acme/..api.json")
    assert resp.status_code == 400


def test_scan_detail_requires_filename(client, export_dir):
    assert client.get("/api/scans/").status_code == 400


def test_scan_detail_unparseable(client, export_dir):
    resp = client.get("/api/scans/broken.json")
    assert resp.status_code == 404
    assert "failed to read or parse report" in resp.json()["detail"]


def test_scan_detail_missing(client, export_dir):
    assert client.get("/api/scans/acme/missing.json").status_code == 404


def test_unreadable_export_dir(client, tmp_path, monkeypatch):
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "missing"))
    for url in ("/api/scans", "/api/projects", "/api/projects/acme"):
        resp = client.get(url)
        assert resp.status_code == 500
        assert resp.json()["detail"] == "failed to read export directory"


def test_files_added_between_requests_are_picked_up(client, export_dir):
    assert len(client.get("/api/scans").json()) == 4
    (export_dir / "beta").mkdir()
    (export_dir / "beta" / "db.json").write_text('{"ArtifactName": "beta-db:1"}', encoding="utf-8")
    projects = client.get("/api/projects").json()
    assert [project["projectName"] for project in projects] == ["acme", "beta"]


def test_security_headers(client, export_dir):
    resp = client.get("/api/scans")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["Cache-Control"] == "no-store"


def test_cors_preflight_allowed_origin(client):
    resp = client.options(
        "/api/projects",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert resp.headers["access-control-max-age"] == "300"


def test_cors_rejects_unknown_origin(client):
    resp = client.options(
        "/api/projects",
        headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 400
    assert "access-control-allow-origin" not in resp.headers


def test_cors_simple_request(client, export_dir):
    resp = client.get("/api/scans", headers={"Origin": "http://localhost:3000"})
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_odd_files_do_not_break_listings(client, export_dir):
    (export_dir / "acme" / "deep.json").write_text("[" * 200000 + "]" * 200000, encoding="utf-8")
    try:
        with open(os.path.join(os.fsencode(export_dir / "acme"), b"w\xffeb.json"), "wb") as fh:
            fh.write(b'{"ArtifactName": "acme-web:1"}')
    except OSError:
        pass

    resp = client.get("/api/scans")
    assert resp.status_code == 200
    filenames = [scan["filename"] for scan in resp.json()]
    assert "acme/deep.json" in filenames
    assert len(filenames) == 5
    assert client.get("/api/projects").status_code == 200
    assert client.get("/api/projects/acme").status_code == 200
    assert client.get("/api/scans/acme/deep.json").status_code == 404
