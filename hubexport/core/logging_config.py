"""
Centralized logging configuration for hubexport
"""

import os
import logging
import sys

_logging_configured = False


def configure_logging(default_level: str = "INFO") -> None:
    """Configure logging with centralized settings.

    Args:
        default_level: Level used when LOG_LEVEL is not set in the environment
    """
    global _logging_configured

    log_level = (os.getenv("LOG_LEVEL") or default_level).upper()

    # Only configure root logger once
    if not _logging_configured:
        root = logging.getLogger()
        if not root.handlers:
            logging.basicConfig(
                level=log_level,
                format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
                handlers=[logging.StreamHandler(sys.stderr)]
            )
        _logging_configured = True

        # Request lines from the HTTP stack are noise at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger().setLevel(log_level)
