from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from indexer.decoder import MalformedReport
from indexer.discovery import DirectoryUnreadable
from indexer.queries import InvalidScanPath, ScanNotFound, get_project, get_scan_detail, list_projects, list_scans
from indexer.settings import resolve_settings

LOGGER = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def write_json_file(path: str, payload: Any) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)


def run_query(args: argparse.Namespace, export_dir: str) -> Any:
    if args.command == "scans":
        return list_scans(export_dir)
    if args.command == "projects":
        return [project.to_dict() for project in list_projects(export_dir)]
    if args.command == "project":
        return get_project(export_dir, args.name).to_dict()
    if args.command == "scan":
        return get_scan_detail(export_dir, args.path)
    raise ValueError(f"Unsupported command: {args.command}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarise vulnerability scan reports from an export directory")
    parser.add_argument("--export-dir", help="Directory holding the exported JSON reports")
    parser.add_argument("--settings", help="Optional settings YAML")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"), help="Logging level")
    parser.add_argument("--json-output", help="Also write the payload to this path")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("scans", help="List every scan file")
    subparsers.add_parser("projects", help="List projects with their images")
    project = subparsers.add_parser("project", help="Show one project")
    project.add_argument("name")
    scan = subparsers.add_parser("scan", help="Show the vulnerabilities of one scan file")
    scan.add_argument("path", help="Path relative to the export directory")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    settings = resolve_settings(args.settings)
    export_dir = args.export_dir or settings["paths"]["export_dir"]

    try:
        payload = run_query(args, export_dir)
    except InvalidScanPath as exc:
        LOGGER.error("Invalid arguments: %s", exc)
        return 2
    except (DirectoryUnreadable, ScanNotFound, MalformedReport) as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.json_output:
        write_json_file(args.json_output, payload)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
