from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from dashboard.config import APP_TITLE, SETTINGS, get_export_dir
from dashboard.models import ProjectSummary, ScanDetail, ScanSummary
from dashboard.monitoring import router as monitoring_router
from indexer.decoder import MalformedReport
from indexer.discovery import DirectoryUnreadable
from indexer.queries import (
    InvalidScanPath,
    ScanNotFound,
    get_project,
    get_scan_detail,
    list_projects,
    list_scans,
)

LOGGER = logging.getLogger(__name__)

app = FastAPI(title=APP_TITLE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS["cors"]["allowed_origins"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"],
    allow_credentials=False,
    max_age=300,
)
app.include_router(monitoring_router)


@app.middleware("http")
async def security_middleware(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    # every answer is recomputed from the export directory
    response.headers["Cache-Control"] = "no-store"
    return response


def _export_unreadable(exc: DirectoryUnreadable) -> HTTPException:
    LOGGER.error("Export directory unreadable: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="failed to read export directory",
    )


@app.get("/", response_class=PlainTextResponse)
def index() -> str:
    return f"{APP_TITLE} backend is running.\nTry /health or /api/scans\n"


@app.get("/api/scans", response_model=list[ScanSummary])
def api_scans(export_dir: str = Depends(get_export_dir)) -> list[ScanSummary]:
    try:
        scans = list_scans(export_dir)
    except DirectoryUnreadable as exc:
        raise _export_unreadable(exc) from exc
    return [ScanSummary.model_validate(scan) for scan in scans]


@app.get("/api/projects", response_model=list[ProjectSummary])
def api_projects(export_dir: str = Depends(get_export_dir)) -> list[ProjectSummary]:
    try:
        projects = list_projects(export_dir)
    except DirectoryUnreadable as exc:
        raise _export_unreadable(exc) from exc
    return [ProjectSummary.model_validate(project.to_dict()) for project in projects]


@app.get("/api/projects/{project_name}", response_model=ProjectSummary)
def api_project(project_name: str, export_dir: str = Depends(get_export_dir)) -> ProjectSummary:
    try:
        project = get_project(export_dir, project_name)
    except DirectoryUnreadable as exc:
        raise _export_unreadable(exc) from exc
    return ProjectSummary.model_validate(project.to_dict())


@app.get("/api/scans/{scan_path:path}", response_model=ScanDetail)
def api_scan_detail(scan_path: str, export_dir: str = Depends(get_export_dir)) -> ScanDetail:
    """Full vulnerability list of one report, addressed by its path under the export root."""
    try:
        detail = get_scan_detail(export_dir, scan_path)
    except InvalidScanPath as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ScanNotFound, MalformedReport) as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"failed to read or parse report: {exc}",
        ) from exc
    return ScanDetail.model_validate(detail)
