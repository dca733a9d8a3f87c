from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator

from indexer.grading import calculate_grade


def iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


@dataclass(frozen=True)
class Vulnerability:
    vulnerability_id: str = ""
    pkg_name: str = ""
    pkg_path: str = ""
    installed_version: str = ""
    fixed_version: str = ""
    severity: str = ""
    title: str = ""
    description: str = ""
    primary_url: str = ""
    published_date: str = ""
    last_modified_date: str = ""
    cvss: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        # Entries are handed back in the scanner's own vocabulary.
        payload: dict[str, Any] = {
            "VulnerabilityID": self.vulnerability_id,
            "PkgName": self.pkg_name,
            "InstalledVersion": self.installed_version,
            "FixedVersion": self.fixed_version,
            "Severity": self.severity,
            "Title": self.title,
            "Description": self.description,
        }
        optional = {
            "PkgPath": self.pkg_path,
            "PrimaryURL": self.primary_url,
            "PublishedDate": self.published_date,
            "LastModifiedDate": self.last_modified_date,
            "CVSS": self.cvss,
        }
        payload.update({key: value for key, value in optional.items() if value})
        return payload


@dataclass(frozen=True)
class ReportResult:
    target: str = ""
    result_class: str = ""
    type: str = ""
    vulnerabilities: tuple[Vulnerability, ...] = ()


@dataclass(frozen=True)
class RawReport:
    schema_version: int = 0
    artifact_name: str = ""
    artifact_type: str = ""
    results: tuple[ReportResult, ...] = ()

    def iter_vulnerabilities(self) -> Iterator[Vulnerability]:
        for result in self.results:
            yield from result.vulnerabilities


@dataclass(frozen=True)
class ScanRecord:
    path: str
    size: int
    timestamp: datetime
    artifact_name: str = ""
    project: str = ""
    image: str = ""
    tag: str = ""
    severity_histogram: dict[str, int] = field(default_factory=dict)

    @property
    def total_vulnerabilities(self) -> int:
        return sum(self.severity_histogram.values())

    @property
    def is_resolved(self) -> bool:
        return bool(self.project and self.image)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.path,
            "size": self.size,
            "modified_at": iso(self.timestamp),
            "artifact_name": self.artifact_name,
            "project_name": self.project,
            "image_name": self.image,
            "tag": self.tag,
            "total_vulns": self.total_vulnerabilities,
            "severity_count": dict(self.severity_histogram),
            "grade": calculate_grade(self.severity_histogram).value,
        }


@dataclass
class ImageSummary:
    image_name: str
    scans: list[ScanRecord]
    last_scan: datetime | None = None

    @property
    def current(self) -> ScanRecord | None:
        return self.scans[0] if self.scans else None

    @property
    def severity_count(self) -> dict[str, int]:
        current = self.current
        return dict(current.severity_histogram) if current else {}

    @property
    def total_vulns(self) -> int:
        current = self.current
        return current.total_vulnerabilities if current else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "image_name": self.image_name,
            "total_vulns": self.total_vulns,
            "severity_count": self.severity_count,
            "grade": calculate_grade(self.severity_count).value,
            "last_scan": iso(self.last_scan),
            "scans": [scan.to_dict() for scan in self.scans],
        }


@dataclass
class ProjectSummary:
    project_name: str
    total_scans: int = 0
    images: list[ImageSummary] = field(default_factory=list)
    last_scan: datetime | None = None

    @classmethod
    def empty(cls, project_name: str) -> "ProjectSummary":
        return cls(project_name=project_name)

    @property
    def severity_count(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for image in self.images:
            for severity, count in image.severity_count.items():
                counts[severity] = counts.get(severity, 0) + count
        return counts

    @property
    def total_vulns(self) -> int:
        return sum(image.total_vulns for image in self.images)

    def to_dict(self) -> dict[str, Any]:
        severity_count = self.severity_count
        return {
            "project_name": self.project_name,
            "total_scans": self.total_scans,
            "total_vulns": self.total_vulns,
            "severity_count": severity_count,
            "grade": calculate_grade(severity_count).value,
            "last_scan": iso(self.last_scan),
            "images": [image.to_dict() for image in self.images],
        }
