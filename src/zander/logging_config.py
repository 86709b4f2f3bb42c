"""Structured JSON logging configuration."""
import logging
import sys

from pythonjsonlogger import jsonlogger

from src.zander.config import settings


def setup_logging() -> None:
    """Configure JSON logging for production, human-readable for dev/staging."""
    level = getattr(logging, settings.log_level_name, logging.INFO)
    if settings.is_production:
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
        handler.setFormatter(formatter)
        logging.root.handlers = [handler]
        logging.root.setLevel(level)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
