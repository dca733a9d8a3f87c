from __future__ import annotations

import os

from indexer.settings import resolve_settings

APP_TITLE = "Trivy Dashboard"
SETTINGS = resolve_settings(os.getenv("DASHBOARD_SETTINGS"))


def get_export_dir() -> str:
    """Export root for the current request; the environment wins over the settings file."""
    return os.getenv("EXPORT_DIR") or SETTINGS["paths"]["export_dir"]
