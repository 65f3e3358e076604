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

from typing import Callable, Iterable, Optional
import functools
import logging
import os

LOGGER = logging.getLogger("covreport")


def force_unix_separator(path: str) -> str:
    """Get the filename with / independent from OS."""
    return path.replace("\\", "/")


def find_source_file(path: str, source_directories: Iterable[str] = ()) -> str:
    """Find the file of a path from a report.

    If the path doesn't exist it is searched in the source directories,
    starting with the longest trailing part of the path.
    If nothing is found the path is returned unchanged.
    """
    if os.path.isfile(path):
        return path

    parts = [part for part in force_unix_separator(path).split("/") if part]
    for directory in source_directories:
        for start in range(len(parts)):
            candidate = os.path.join(directory, *parts[start:])
            if os.path.isfile(candidate):
                LOGGER.debug(f"Using {candidate} for {path}.")
                return candidate

    return path


def read_source_lines(
    path: str,
    encoding: str = "utf-8",
    source_directories: Iterable[str] = (),
) -> list[str]:
    """Read the lines of a source file without line terminators.

    Raises OSError if the file can't be read and ValueError if
    the path is malformed.
    """
    with open(
        find_source_file(path, source_directories),
        "r",
        encoding=encoding,
        errors="replace",
    ) as source_file:
        return source_file.read().splitlines()


def source_reader(
    encoding: str = "utf-8", source_directories: Optional[Iterable[str]] = None
) -> Callable[[str], list[str]]:
    """Get a reader for the source files with the given settings."""
    return functools.partial(
        read_source_lines,
        encoding=encoding,
        source_directories=tuple(source_directories or ()),
    )
