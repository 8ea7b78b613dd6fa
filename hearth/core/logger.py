from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "hearth"


def setup_logging(log_dir: str = "logs", *, level: str = "INFO", stream: bool = True) -> logging.Logger:
    """
    Text log for operators: `<log_dir>/hearth.log` (rotating) plus stderr.

    Safe to call repeatedly; a file handler is added once per log file and the
    level always follows the latest call. Messages carry record ids only.
    """
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    text_path = os.path.abspath(os.path.join(log_dir, "hearth.log"))
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == text_path for h in logger.handlers):
        h = RotatingFileHandler(text_path, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
        h.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(h)

    if stream and not any(type(h) is logging.StreamHandler for h in logger.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(sh)

    return logger
