import logging
import os
from pathlib import Path
from datetime import datetime


def setup_logger(name: str, log_file_prefix: str = None):
    """
    Configure a named logger with timestamped file output.

    Handlers are attached only once per logger name, so calling this from
    several scraper instances reuses the same log file.

    Args:
        name (str): Logger name (e.g. "latest_scraper")
        log_file_prefix (str): File name prefix, defaults to the logger name

    Returns:
        logging.Logger: Configured logger instance
    """
    logs_dir = Path(os.getenv("LOG_DIR", "logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)

    level_name = os.getenv("LOG_LEVEL", "DEBUG").upper()
    level = getattr(logging, level_name, logging.DEBUG)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # File Handler
    if not logger.handlers:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        prefix = log_file_prefix or name
        log_file = logs_dir / f"{prefix}_{timestamp}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)

        file_format = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s - %(message)s"
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger
