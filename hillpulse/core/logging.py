import os
import sys
from logging.handlers import RotatingFileHandler

import logging
from hillpulse.core.config import LOG_PATH


def setup_logger(name: str = "hillpulse", log_path: str = LOG_PATH) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    if not logger.handlers:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=3)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        # Hosted platforms only collect stdout/stderr.
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    return logger


log = setup_logger()
