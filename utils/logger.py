import logging
import sys
from config import settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level() -> int:
    """Debug mode wins over the configured log level"""
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def setup_logger(name: str = "heroku_auth") -> logging.Logger:
    """Setup logger with consistent formatting and level"""
    logger = logging.getLogger(name)

    # Already configured by an earlier import
    if logger.handlers:
        return logger

    level = _resolve_level()
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logger()
