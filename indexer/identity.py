"""Project / image / tag resolution for report files.

Two independent strategies are tried in order:

1. the report's ``ArtifactName`` (``<project>-<image>:<tag>``), and
2. the file's location under the export root, one of
   ``project-image[-YYYYMMDD-HHMMSS].json`` or
   ``project/image[-YYYYMMDD-HHMMSS].json``.

A report whose body could not be decoded has no artifact name, so it is
resolved from its path alone.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Callable, NamedTuple, Optional

from indexer.timestamps import strip_report_extension, strip_timestamp_suffix


class Identity(NamedTuple):
    project: str
    image: str
    tag: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.project and self.image)


UNRESOLVED = Identity("", "", "")


def _split_on_last(value: str, separator: str) -> tuple[str, str] | None:
    """Split on the last ``separator`` unless it is missing or at either edge."""
    index = value.rfind(separator)
    if index <= 0 or index == len(value) - 1:
        return None
    return value[:index], value[index + 1 :]


def split_name_and_tag(artifact_name: str) -> tuple[str, str] | None:
    colons = artifact_name.count(":")
    if colons == 0:
        return artifact_name, ""
    if colons == 1:
        name, tag = artifact_name.split(":")
        return name, tag
    # registry:port/name:tag and friends
    return _split_on_last(artifact_name, ":")


def parse_artifact_name(artifact_name: str) -> Identity | None:
    if not artifact_name:
        return None
    split = split_name_and_tag(artifact_name)
    if split is None:
        return None
    name, tag = split
    project_image = _split_on_last(name, "-")
    if project_image is None:
        # "wordpress:6.6.2" is its own project
        return Identity(name, name, tag)
    project, image = project_image
    return Identity(project, image, tag)


def parse_report_path(rel_path: str | PurePath) -> Identity | None:
    base_path = strip_report_extension(rel_path)
    if not base_path:
        return None
    directory, _, file_name = base_path.rpartition("/")
    if directory:
        project = directory.split("/", 1)[0]
        return Identity(project, strip_timestamp_suffix(file_name))

    stem = strip_timestamp_suffix(file_name)
    project_image = _split_on_last(stem, "-")
    if project_image is None:
        return Identity(stem, "")
    return Identity(*project_image)


Resolver = Callable[[str, str], Optional[Identity]]


def _from_artifact(artifact_name: str, rel_path: str) -> Identity | None:
    identity = parse_artifact_name(artifact_name)
    if identity is None or not identity.is_complete:
        return None
    return identity


def _from_path(artifact_name: str, rel_path: str) -> Identity | None:
    identity = parse_report_path(rel_path)
    if identity is None:
        return None
    # A tag found in the artifact name survives a path-based identity.
    parsed = parse_artifact_name(artifact_name)
    return identity._replace(tag=parsed.tag if parsed else "")


RESOLVERS: tuple[Resolver, ...] = (_from_artifact, _from_path)


def resolve_identity(artifact_name: str, rel_path: str | PurePath) -> Identity:
    rel_path = str(rel_path)
    for resolver in RESOLVERS:
        identity = resolver(artifact_name, rel_path)
        if identity is not None:
            return identity
    parsed = parse_artifact_name(artifact_name)
    return UNRESOLVED._replace(tag=parsed.tag if parsed else "")
