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

"""The result of joining the coverage of a file with its source."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .coverage import LineVisitStatus, TestMethod


@dataclass(frozen=True)
class ShortLineAnalysis:
    """The coverage of a single line by a single tracked test method."""

    line_visits: int
    line_visit_status: LineVisitStatus


@dataclass
class LineAnalysis:
    """The coverage of a single physical line."""

    line_number: int
    line_content: str
    line_visits: Optional[int]
    line_visit_status: LineVisitStatus
    covered_branches: Optional[int] = None
    total_branches: Optional[int] = None
    line_coverage_by_test_method: dict[TestMethod, ShortLineAnalysis] = field(
        default_factory=dict
    )


@dataclass
class FileAnalysis:
    """The lines of an analyzed file, or the error why it couldn't be analyzed."""

    path: str
    error: Optional[str] = None
    lines: list[LineAnalysis] = field(default_factory=list)

    def add_line(self, line: LineAnalysis) -> None:
        """Append the analysis of the next line."""
        self.lines.append(line)

    @property
    def has_error(self) -> bool:
        """Return True if the file couldn't be read."""
        return self.error is not None
