from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from indexer.models import RawReport, ReportResult, Vulnerability


class MalformedReport(ValueError):
    pass


VULNERABILITY_FIELDS = {
    "vulnerability_id": "VulnerabilityID",
    "pkg_name": "PkgName",
    "pkg_path": "PkgPath",
    "installed_version": "InstalledVersion",
    "fixed_version": "FixedVersion",
    "severity": "Severity",
    "title": "Title",
    "description": "Description",
    "primary_url": "PrimaryURL",
    "published_date": "PublishedDate",
    "last_modified_date": "LastModifiedDate",
}


def _string(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedReport(f"{where}.{key} must be a string, got {type(value).__name__}")
    return value


def _list(data: dict[str, Any], key: str, where: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedReport(f"{where}.{key} must be an array, got {type(value).__name__}")
    return value


def _object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedReport(f"{where} must be an object, got {type(value).__name__}")
    return value


def _decode_vulnerability(raw: Any, where: str) -> Vulnerability:
    data = _object(raw, where)
    fields = {attr: _string(data, key, where) for attr, key in VULNERABILITY_FIELDS.items()}
    cvss = data.get("CVSS")
    if cvss is not None and not isinstance(cvss, dict):
        raise MalformedReport(f"{where}.CVSS must be an object")
    return Vulnerability(cvss=cvss or {}, **fields)


def _decode_result(raw: Any, where: str) -> ReportResult:
    data = _object(raw, where)
    vulnerabilities = tuple(
        _decode_vulnerability(item, f"{where}.Vulnerabilities[{index}]")
        for index, item in enumerate(_list(data, "Vulnerabilities", where))
    )
    return ReportResult(
        target=_string(data, "Target", where),
        result_class=_string(data, "Class", where),
        type=_string(data, "Type", where),
        vulnerabilities=vulnerabilities,
    )


def decode_report(payload: bytes | str) -> RawReport:
    try:
        data = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedReport(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedReport("Invalid JSON: nested too deeply") from exc

    data = _object(data, "report")
    schema_version = data.get("SchemaVersion") or 0
    if not isinstance(schema_version, int) or isinstance(schema_version, bool):
        raise MalformedReport("report.SchemaVersion must be an integer")
    results = tuple(
        _decode_result(item, f"Results[{index}]")
        for index, item in enumerate(_list(data, "Results", "report"))
    )
    return RawReport(
        schema_version=schema_version,
        artifact_name=_string(data, "ArtifactName", "report"),
        artifact_type=_string(data, "ArtifactType", "report"),
        results=results,
    )


def load_report(path: str | Path) -> RawReport:
    try:
        payload = Path(path).read_bytes()
    except OSError as exc:
        raise MalformedReport(f"Cannot read {path}: {exc}") from exc
    return decode_report(payload)
