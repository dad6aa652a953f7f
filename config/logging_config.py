import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logging(logger_name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Setup logging configuration for the patent classifier

    Args:
        logger_name: Name of the logger
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to the LOG_LEVEL environment variable, then INFO.

    Returns:
        Configured logger instance
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level))

    # Avoid adding handlers if they already exist
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
