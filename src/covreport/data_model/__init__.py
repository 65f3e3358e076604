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
The covreport coverage data model.

The model is free of process wide state: every object is built from
values handed in by a format adapter and only changed by its own
``add_*`` and ``merge`` methods.
"""

from .analysis import FileAnalysis, LineAnalysis, ShortLineAnalysis
from .container import Assembly, Class, ParserResult
from .coverage import (
    Branch,
    CodeElement,
    CodeElementType,
    CodeFile,
    CoverageByTrackedMethod,
    LineVisitStatus,
    MethodMetric,
    Metric,
    MetricMergeOrder,
    MetricType,
    TestMethod,
)
from .stats import CoverageStat, SummarizedStats

__all__ = [
    "Assembly",
    "Branch",
    "Class",
    "CodeElement",
    "CodeElementType",
    "CodeFile",
    "CoverageByTrackedMethod",
    "CoverageStat",
    "FileAnalysis",
    "LineAnalysis",
    "LineVisitStatus",
    "MethodMetric",
    "Metric",
    "MetricMergeOrder",
    "MetricType",
    "ParserResult",
    "ShortLineAnalysis",
    "SummarizedStats",
    "TestMethod",
]
