"""ASGI entrypoint: ``uvicorn app.main:app``."""

import logging

from app.api.app import create_app
from app.config.settings import settings
from app.utils.logger import setup_logger

setup_logger("app", level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

app = create_app()
