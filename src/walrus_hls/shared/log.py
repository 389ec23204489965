"""Structured logger construction.

Every component logs through a Powertools ``Logger`` (JSON lines with a
``service`` key). Records go to stderr so that stdout stays reserved for
the CLI summary, which may be machine-read with ``--json``.
"""

import logging
import os
import sys

from aws_lambda_powertools import Logger

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_logger(service: str) -> Logger:
    """Build a component logger.

    The level is read straight from ``LOG_LEVEL`` so that creating a logger
    at import time never loads (or fails on) the rest of the settings. An
    unknown level falls back to INFO; ``Settings`` rejects it later.

    Args:
        service: Service name written to every record (e.g. 'walrus-hls-uploader')

    Returns:
        Powertools Logger writing JSON to stderr
    """
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        level = "INFO"

    return Logger(
        service=service,
        level=level,
        logger_handler=logging.StreamHandler(sys.stderr),
    )
