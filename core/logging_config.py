"""
Logging setup shared by the whole service.
"""
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Attach a stream handler to the app logger once and return it."""
    app_logger = logging.getLogger("pdf_ask")
    if not app_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
    app_logger.setLevel(level.upper())
    return app_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"pdf_ask.{name}")


logger = configure_logging()
