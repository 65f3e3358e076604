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

"""
Merge whole coverage results.

The merge functions take several coverage data items
and fold them into the first one with the same identity.
This may change the input objects, so that they should not be used afterwards.

All merges of a path run on the calling thread one after the other,
a :class:`CodeFile` is never merged concurrently.
"""

import logging
from typing import Iterable

from .data_model.container import ParserResult
from .data_model.coverage import CodeFile

LOGGER = logging.getLogger("covreport")


def merge_code_files(files: Iterable[CodeFile]) -> list[CodeFile]:
    """Merge the files with the same path.

    Returns one file per path in the order of the first appearance.
    """
    merged = dict[str, CodeFile]()
    for codefile in files:
        if (target := merged.get(codefile.path)) is None:
            merged[codefile.path] = codefile
        else:
            target.merge(codefile)

    LOGGER.debug(f"Merged coverage data into {len(merged)} files.")
    return list(merged.values())


def merge_parser_results(results: Iterable[ParserResult]) -> ParserResult:
    """Merge the results of several format adapters into the first one."""
    iterator = iter(results)
    try:
        merged = next(iterator)
    except StopIteration:
        raise ValueError("At least one parser result is needed.") from None

    for result in iterator:
        merged.merge(result)

    return merged
