from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScanSummary(ApiModel):
    filename: str
    size: int
    modified_at: datetime
    artifact_name: str = ""
    project_name: str = ""
    image_name: str = ""
    tag: str = ""
    total_vulns: int
    severity_count: dict[str, int]
    grade: str


class ImageSummary(ApiModel):
    image_name: str
    total_vulns: int
    severity_count: dict[str, int]
    grade: str
    last_scan: datetime | None = None
    scans: list[ScanSummary]


class ProjectSummary(ApiModel):
    project_name: str
    total_scans: int
    total_vulns: int
    severity_count: dict[str, int]
    grade: str
    last_scan: datetime | None = None
    images: list[ImageSummary]


class ScanDetail(ApiModel):
    artifact_name: str
    artifact_type: str
    total_vulns: int
    # entries keep the scanner's own field names (VulnerabilityID, PkgName, ...)
    vulnerabilities: list[dict[str, Any]]
