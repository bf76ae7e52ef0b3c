"""
Voice agent tool service entry point.

Serves the tool-call webhook, onboarding endpoints and Google OAuth
routes over HTTP.

Usage:
    python main.py
"""

import logging

import uvicorn

from src.api.app import create_app
from src.config import settings

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    logger.info("Server running on port %d", settings.server.port)
    uvicorn.run(
        create_app(),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )
