# course_portal/core/logging_config.py - Logging setup driven by settings
import logging
from logging.handlers import RotatingFileHandler

from course_portal.core.config import settings

LOG_FORMATS = {
    "simple": "%(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def configure_logging() -> None:
    """Configure the root logger once from LOG_* settings"""
    fmt = LOG_FORMATS.get(settings.LOG_FORMAT, LOG_FORMATS["detailed"])
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.LOG_FILE_PATH:
        handlers.append(
            RotatingFileHandler(
                settings.LOG_FILE_PATH,
                maxBytes=settings.LOG_MAX_SIZE,
                backupCount=settings.LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    logging.basicConfig(level=settings.LOG_LEVEL, format=fmt, handlers=handlers)

    # SQL echo is controlled by DATABASE_ECHO, keep the engine logger quiet otherwise
    if not settings.DATABASE_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
