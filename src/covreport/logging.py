# -*- coding:utf-8 -*-

#  ************************** Copyrights and license ***************************
#
# This file is part of covreport 1.0+main, a coverage data model and merge core.
#
# _____________________________________________________________________________
#
# Copyright (c) 2024-2026 the covreport authors
#
# This software is distributed under the 3-clause BSD License.
# For more information, see the README.rst file.
#
# ****************************************************************************

"""Console logging of covreport, colored with colorlog."""

import logging
import os
import sys
from typing import Any, Optional
from colorlog import ColoredFormatter

from .options import Options

LOGGER = logging.getLogger("covreport")
DEFAULT_LOGGING_HANDLER = logging.StreamHandler(sys.stderr)

LOG_FORMAT = "(%(levelname)s) %(message)s"
LOG_FORMAT_THREADS = "(%(levelname)s) - %(threadName)s - %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _ci_logging_prefixes() -> Optional[dict[int, str]]:
    """Get the prefixes which turn a log message into a CI annotation."""
    if "TF_BUILD" in os.environ:
        return {
            logging.WARNING: "##vso[task.logissue type=warning]",
            logging.ERROR: "##vso[task.logissue type=error]",
        }
    if "GITHUB_ACTIONS" in os.environ:
        return {
            logging.WARNING: "::warning::",
            logging.ERROR: "::error::",
        }
    return None


class CiFormatter(logging.Formatter):
    """Formatter which only emits the messages a CI system annotates."""

    def __init__(self, prefixes: dict[int, str]) -> None:
        super().__init__(fmt=LOG_FORMAT)
        self.prefixes = prefixes

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno not in self.prefixes:
            return ""
        return f"{self.prefixes[record.levelno]}{super().format(record)}"


def _colored_formatter(threads: int = 1) -> ColoredFormatter:
    """Configure the colored logging formatter."""
    log_format = LOG_FORMAT_THREADS if threads > 1 else LOG_FORMAT
    return ColoredFormatter(
        f"%(log_color)s{log_format}",
        reset=True,
        log_colors=LOG_COLORS,
        style="%",
        stream=sys.stderr,
    )


def configure_logging() -> None:
    """Configure the logging module."""
    DEFAULT_LOGGING_HANDLER.setFormatter(_colored_formatter())
    logging.basicConfig(level=logging.INFO, handlers=[DEFAULT_LOGGING_HANDLER])

    if (prefixes := _ci_logging_prefixes()) is not None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CiFormatter(prefixes))
        logging.getLogger().addHandler(handler)

    def exception_hook(exc_type: Any, exc_value: Any, exc_traceback: Any) -> None:
        logging.exception(
            "Uncaught EXCEPTION", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = exception_hook


def update_logging(options: Options) -> None:
    """Update the logger configuration depending on the options."""
    if options.verbose:
        LOGGER.setLevel(logging.DEBUG)

    # Show the worker thread of each message if files are built in parallel
    DEFAULT_LOGGING_HANDLER.setFormatter(_colored_formatter(options.parallel))
