from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable

from indexer.models import ImageSummary, ProjectSummary, ScanRecord
from indexer.ranking import latest_scan_time, rank_scans

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def summarize_image(image_name: str, records: Iterable[ScanRecord]) -> ImageSummary:
    records = list(records)
    return ImageSummary(
        image_name=image_name,
        scans=rank_scans(records),
        last_scan=latest_scan_time(records),
    )


def summarize_project(project_name: str, records: Iterable[ScanRecord]) -> ProjectSummary:
    """Group one project's records by image.

    Totals come from each image's current scan only; the scan count covers
    the whole history. Records without a resolved project or image, or
    belonging to another project, are ignored.
    """
    by_image: dict[str, list[ScanRecord]] = defaultdict(list)
    for record in records:
        if record.project != project_name or not record.is_resolved:
            continue
        by_image[record.image].append(record)

    if not by_image:
        return ProjectSummary.empty(project_name)

    images = [summarize_image(name, scans) for name, scans in by_image.items()]
    images.sort(key=lambda image: image.image_name)
    images.sort(key=lambda image: image.last_scan or _EPOCH, reverse=True)
    return ProjectSummary(
        project_name=project_name,
        total_scans=sum(len(image.scans) for image in images),
        images=images,
        last_scan=max((image.last_scan for image in images if image.last_scan), default=None),
    )


def group_projects(records: Iterable[ScanRecord]) -> list[ProjectSummary]:
    by_project: dict[str, list[ScanRecord]] = defaultdict(list)
    for record in records:
        if record.is_resolved:
            by_project[record.project].append(record)
    return [summarize_project(name, by_project[name]) for name in sorted(by_project)]
