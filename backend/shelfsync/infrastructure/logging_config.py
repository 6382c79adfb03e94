"""
Logging configuration for the application.
Writes one log file per day under the configured log directory.
"""
import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from pathlib import Path

from ..config import settings


def setup_logging():
    """Configures root logging with a daily file and the console"""

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    level = getattr(logging, settings.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Avoid duplicated handlers when called more than once (reload, tests)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    log_file = None
    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        today = datetime.now().strftime("%Y-%m-%d")
        log_file = log_dir / f"shelfsync_{today}.log"

        # 10MB per file, 5 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    logging.getLogger("shelfsync").setLevel(level)
    logging.getLogger("shelfsync.api").setLevel(level)

    # Ledger and quantity adjustments log every step at DEBUG
    for name in ("shelfsync.application.services_inventory", "shelfsync.application.services_history"):
        logging.getLogger(name).setLevel(logging.DEBUG)

    # SQL only for warnings and errors
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    logging.info("Logging configured. File: %s", log_file or "<console only>")

    return root_logger


def get_logger(name: str = None):
    """Returns a logger under the application namespace"""
    if name:
        return logging.getLogger(f"shelfsync.{name}")
    return logging.getLogger("shelfsync")
