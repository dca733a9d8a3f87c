from __future__ import annotations

import logging

import uvicorn

from dashboard.config import SETTINGS
from indexer.main import setup_logging

LOGGER = logging.getLogger(__name__)


def main() -> None:
    level = str(SETTINGS["logging"]["level"])
    setup_logging(level)
    host = SETTINGS["server"]["host"]
    port = int(SETTINGS["server"]["port"])
    LOGGER.info("Backend listening on %s:%s (export dir %s)", host, port, SETTINGS["paths"]["export_dir"])
    uvicorn.run("dashboard.app:app", host=host, port=port, log_level=level.lower())


if __name__ == "__main__":
    main()
