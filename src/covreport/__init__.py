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

"""covreport: a coverage data model with merge and source analysis."""

from .version import __version__

__all__ = ["__version__"]
