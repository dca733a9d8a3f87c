from __future__ import annotations

import os
from typing import Any, Mapping

import yaml

DEFAULT_EXPORT_DIR = "/app/export"
DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000", "http://localhost:80", "http://localhost"]


def load_yaml(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def resolve_allowed_origins(environ: Mapping[str, str] | None = None) -> list[str]:
    """Pick the CORS origins for the deployment.

    ``ALLOWED_ORIGINS`` (comma separated) wins, then ``FQDN`` (scheme taken from
    ``VITE_API_BASE``), then ``FRONTEND_PORT`` for local development.
    """
    environ = os.environ if environ is None else environ

    explicit = environ.get("ALLOWED_ORIGINS", "")
    if explicit:
        return [origin.strip() for origin in explicit.split(",") if origin.strip()]

    fqdn = environ.get("FQDN", "").strip()
    if fqdn:
        # plain http only for local tests behind an http API base
        scheme = "http" if environ.get("VITE_API_BASE", "").startswith("http://") else "https"
        return [f"{scheme}://{fqdn}"]

    frontend_port = environ.get("FRONTEND_PORT", "").strip()
    if frontend_port:
        return [f"http://localhost:{frontend_port}", "http://localhost"]

    return list(DEFAULT_ALLOWED_ORIGINS)


def resolve_settings(path: str | None = None) -> dict[str, Any]:
    settings = load_yaml(path) if path else {}
    settings.setdefault("paths", {})
    settings.setdefault("server", {})
    settings.setdefault("logging", {})
    settings.setdefault("cors", {})
    settings["paths"].setdefault("export_dir", os.getenv("EXPORT_DIR") or DEFAULT_EXPORT_DIR)
    settings["server"].setdefault("host", os.getenv("HOST", "0.0.0.0"))
    settings["server"].setdefault("port", int(os.getenv("PORT", "8080")))
    settings["logging"].setdefault("level", os.getenv("LOG_LEVEL", "INFO"))
    settings["cors"].setdefault("allowed_origins", resolve_allowed_origins())
    return settings
