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

"""Exceptions used in covreport."""


class CovreportDataAssertionError(AssertionError):
    """Exception for invalid coverage data."""


class CovreportMergeAssertionError(AssertionError):
    """Exception for data merge errors."""


class SanityCheckError(AssertionError):
    """Raised when a sanity check fails."""
