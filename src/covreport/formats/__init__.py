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

"""The format independent part of the adapters which read coverage reports."""

from .common import (
    FileInput,
    MethodInput,
    TestMethodInput,
    build_assembly,
    build_code_file,
    build_line_arrays,
    build_parser_result,
    line_status,
    set_code_elements,
)

__all__ = [
    "FileInput",
    "MethodInput",
    "TestMethodInput",
    "build_assembly",
    "build_code_file",
    "build_line_arrays",
    "build_parser_result",
    "line_status",
    "set_code_elements",
]
