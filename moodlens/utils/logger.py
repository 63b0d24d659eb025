import logging
import os
import sys
from typing import Optional

# Constants
LOG_DIR = "logs"
LOG_FILE_NAME = "moodlens.log"
LOG_FORMAT = "[%(asctime)s] | %(levelname)-8s | %(name)-15s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "moodlens", level: str = "INFO",
                 log_dir: Optional[str] = LOG_DIR) -> logging.Logger:
    """
    Configures and returns a standardized logger.

    Features:
    - Console Output (StreamHandler)
    - File Output, rewritten on each run (skipped when log_dir is None)
    - Standardized Formatting

    Args:
        name: Name of the logger module
        level: Level name, e.g. "INFO" or "DEBUG"
        log_dir: Directory for the log file

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers if setup is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME), mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
