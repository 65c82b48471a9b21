#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
import sys
from typing import IO

logger = logging.getLogger("kube_pods_check")


def get_formatter(format_str: str = "%(asctime)s %(levelname)s %(message)s") -> logging.Formatter:
    return logging.Formatter(format_str)


def clear_console_logging() -> None:
    logger.handlers[:] = []
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.WARNING)


# Set default logging handler to avoid "No handler found" warnings.
clear_console_logging()


def setup_logging_handler(stream: IO[str], formatter: logging.Formatter | None = None) -> None:
    """Write all log messages to the given stream.

    stdout is reserved for the plug-in output, so the console variant of this
    writes to stderr.
    """
    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(formatter or get_formatter())

    del logger.handlers[:]  # Remove all previously existing handlers
    logger.addHandler(handler)


def verbosity_to_log_level(verbosity: int) -> int:
    """Values for "verbosity":

      0, 1: enables WARNING and above (a single -v only adds OK findings)
      2: enables INFO and above
      3 and more: enables DEBUG and above (ALL messages)

    >>> verbosity_to_log_level(1) == logging.WARNING
    True
    >>> verbosity_to_log_level(5) == logging.DEBUG
    True
    """
    if verbosity < 0:
        raise ValueError(verbosity)
    if verbosity <= 1:
        return logging.WARNING
    if verbosity == 2:
        return logging.INFO
    return logging.DEBUG


def setup_console_logging(verbosity: int) -> None:
    setup_logging_handler(sys.stderr)
    logger.setLevel(verbosity_to_log_level(verbosity))
