from __future__ import annotations

import logging

import uvicorn

from pms.api.app import create_app
from pms.application.container import build_container
from pms.config import get_app_paths, load_settings
from pms.logging_config import setup_logging

log = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    logs_dir = settings.logs_dir or get_app_paths().logs_dir
    setup_logging(logs_dir, level=settings.log_level)

    container = build_container(settings)
    app = create_app(container, api_prefix=settings.api_prefix)

    log.info(
        "server_starting host=%s port=%s prefix=%s seeded=%s",
        settings.host, settings.port, settings.api_prefix or "/", settings.seed_sample_data,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
