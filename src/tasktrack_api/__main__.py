"""
Run the backend with uvicorn.

Usage:
    python -m tasktrack_api
"""
from __future__ import annotations

import logging

import uvicorn

from .main import configure_logging, create_app
from .settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
