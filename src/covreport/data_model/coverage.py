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

This module represents the core data structures which format adapters
fill with the coverage facts of a single report. A :class:`CodeFile`
holds the per line visit counts of one source file as dense arrays
indexed by the line number, index 0 is never a real line.
A visit count of ``-1`` marks a line without executable code.

All of the ``merge()`` methods take a second coverage item with the
same identity and combine it into ``self``.
This may change the input objects, so that they should not be used afterwards.

In a mathematical sense, all of these ``merge()`` functions
must behave somewhat like an addition operator for every aggregated
statistic (coverable/covered lines, covered/total branches):

* commutative: order of arguments must not matter,
  so that ``merge(a, b)`` must match ``merge(b, a)``.
* associative: order of merging must not matter,
  so that ``merge(a, merge(b, c))`` must match ``merge(merge(a, b), c)``.
* identity element: a file without any coverable line
  does not change the statistics of the other side.
"""

from __future__ import annotations
import copy
from enum import Enum, IntEnum
from itertools import zip_longest
import logging
from typing import (
    Callable,
    Iterable,
    Mapping,
    NoReturn,
    Optional,
    Sequence,
)
from dataclasses import dataclass

from ..exceptions import CovreportDataAssertionError, CovreportMergeAssertionError
from ..utils import read_source_lines
from .analysis import FileAnalysis, LineAnalysis, ShortLineAnalysis
from .coverage_dict import CoverageDict
from .merging import NOT_COVERABLE_VISITS, merge_visit_counts
from .stats import CoverageStat, SummarizedStats

LOGGER = logging.getLogger("covreport")

CYCLOMATIC_COMPLEXITY_URL = "https://en.wikipedia.org/wiki/Cyclomatic_complexity"
CODE_COVERAGE_URL = "https://en.wikipedia.org/wiki/Code_coverage"

SourceReader = Callable[[str], list[str]]


class LineVisitStatus(IntEnum):
    """The coverage state of a single line, ordered by precedence for merging."""

    NOT_COVERABLE = 0
    NOT_COVERED = 1
    PARTIALLY_COVERED = 2
    COVERED = 3

    @staticmethod
    def merge(left: LineVisitStatus, right: LineVisitStatus) -> LineVisitStatus:
        """Merge the status of the same line from two reports.

        A line which is coverable in any report is coverable:
        >>> LineVisitStatus.merge(LineVisitStatus.NOT_COVERABLE, LineVisitStatus.NOT_COVERED)
        <LineVisitStatus.NOT_COVERED: 1>
        >>> LineVisitStatus.merge(LineVisitStatus.COVERED, LineVisitStatus.PARTIALLY_COVERED)
        <LineVisitStatus.COVERED: 3>
        """
        return max(left, right)

    @property
    def is_coverable(self) -> bool:
        """Return True if the line contains executable code."""
        return self is not LineVisitStatus.NOT_COVERABLE

    @property
    def is_covered(self) -> bool:
        """Return True if the line was visited at least partially."""
        return self in (LineVisitStatus.COVERED, LineVisitStatus.PARTIALLY_COVERED)


def merge_visit_statuses(
    left: Sequence[LineVisitStatus], right: Sequence[LineVisitStatus]
) -> list[LineVisitStatus]:
    """Merge two status arrays element-wise, a missing entry is not coverable."""
    return [
        LineVisitStatus.merge(a, b)
        for a, b in zip_longest(left, right, fillvalue=LineVisitStatus.NOT_COVERABLE)
    ]


def _reconcile_line(
    visits: int, status: LineVisitStatus
) -> tuple[int, LineVisitStatus]:
    """Fix a mismatch between the visit count and the status of a merged line.

    >>> _reconcile_line(3, LineVisitStatus.NOT_COVERABLE)
    (3, <LineVisitStatus.COVERED: 3>)
    >>> _reconcile_line(-1, LineVisitStatus.NOT_COVERED)
    (0, <LineVisitStatus.NOT_COVERED: 1>)
    >>> _reconcile_line(-2, LineVisitStatus.NOT_COVERABLE)
    (-2, <LineVisitStatus.NOT_COVERABLE: 0>)
    """
    if status is LineVisitStatus.NOT_COVERABLE:
        if visits > 0:
            return visits, LineVisitStatus.COVERED
        if visits == 0:
            return visits, LineVisitStatus.NOT_COVERED
    elif visits < 0:
        return 0, status

    return visits, status


class CoverageBase:
    """Base class for coverage information."""

    __slots__ = ()

    def raise_merge_error(self, msg: str, other: CoverageBase) -> NoReturn:
        """Raise the exception with message extended with context."""
        raise CovreportMergeAssertionError(
            "\n".join(
                [
                    f"{self.location} {msg}",
                    f"Merge target is: {self.location}",
                    f"Merge source is: {other.location}",
                ]
            )
        )

    def raise_data_error(self, msg: str) -> NoReturn:
        """Raise the exception with message extended with context."""
        raise CovreportDataAssertionError(f"{self.location} {msg}")

    @property
    def location(self) -> str:
        """Get the location of the coverage data used in error messages."""
        raise NotImplementedError("Function 'location' not implemented.")


class Branch(CoverageBase):
    r"""Represent coverage information about one outcome of a conditional statement.

    Two branches are equal if they have the same identifier,
    the visit count is not part of the identity.

    Args:
        identifier (str):
            Identifier of the branch, unique within a line.
        visit_count (int):
            Number of times this branch was followed.
    """

    __slots__ = ("identifier", "visit_count")

    def __init__(self, identifier: str, visit_count: int) -> None:
        self.identifier = identifier
        if visit_count < 0:
            self.raise_data_error("visit count must not be a negative value.")
        self.visit_count = visit_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Branch):
            return NotImplemented
        return self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash(self.identifier)

    def __repr__(self) -> str:
        return f"Branch({self.identifier!r}, {self.visit_count})"

    def merge(self, other: Branch) -> None:
        """
        Merge Branch information.

        Several partial reports may observe the same physical branch,
        therefore the counts are not added.

        Do not use 'other' objects afterwards!

        Examples:
        >>> left = Branch("1", 1)
        >>> left.merge(Branch("1", 4))
        >>> left.visit_count
        4
        >>> left.merge(Branch("2", 4))
        Traceback (most recent call last):
          ...
        covreport.exceptions.CovreportMergeAssertionError: branch 1 Identifier must be equal, got 1 and 2.
        Merge target is: branch 1
        Merge source is: branch 2
        """
        if self.identifier != other.identifier:
            self.raise_merge_error(
                f"Identifier must be equal, got {self.identifier} and {other.identifier}.",
                other,
            )
        self.visit_count = max(self.visit_count, other.visit_count)

    def copy(self) -> Branch:
        """Get an independent copy of the branch."""
        return Branch(self.identifier, self.visit_count)

    @property
    def key(self) -> str:
        """Get the key used for the dictionary to unique identify the branch."""
        return self.identifier

    @property
    def location(self) -> str:
        return f"branch {self.identifier}"

    @property
    def is_visited(self) -> bool:
        """Return True if the branch was followed at least once."""
        return self.visit_count > 0


BranchesByLine = dict[int, CoverageDict[str, Branch]]


def _branches_by_line(
    branches_by_line: Mapping[int, Iterable[Branch]],
) -> BranchesByLine:
    """Copy a branch map, branches with the same identifier on one line are merged."""
    result = BranchesByLine()
    for lineno, branches in branches_by_line.items():
        line_branches = CoverageDict[str, Branch]()
        for branch in branches:
            if branch.key in line_branches:
                line_branches[branch.key].merge(branch.copy())
            else:
                line_branches[branch.key] = branch.copy()
        result[lineno] = line_branches
    return result


@dataclass(frozen=True)
class TestMethod:
    """A single test whose coverage is tracked separately.

    ``name`` is the fully qualified name (test class and method),
    ``short_name`` the name used for display.
    """

    __test__ = False  # not a pytest test class

    name: str
    short_name: str


class CoverageByTrackedMethod(CoverageBase):
    """The line coverage of one tracked test method within one file.

    Uses the same indexing as :class:`CodeFile`.
    """

    __slots__ = ("coverage", "line_visit_status")

    def __init__(
        self,
        coverage: Sequence[int],
        line_visit_status: Sequence[LineVisitStatus],
    ) -> None:
        if len(coverage) != len(line_visit_status):
            raise CovreportDataAssertionError(
                f"Coverage of tracked method has {len(coverage)} visit counts "
                f"but {len(line_visit_status)} states."
            )
        self.coverage = list(coverage)
        self.line_visit_status = [LineVisitStatus(s) for s in line_visit_status]

    def __repr__(self) -> str:
        return f"CoverageByTrackedMethod({self.coverage!r})"

    def merge(self, other: CoverageByTrackedMethod) -> None:
        """
        Merge the coverage of a test which contributed coverage more than once.

        Both runs are real executions, so the visit counts are added.

        Do not use 'other' objects afterwards!

        Examples:
        >>> left = CoverageByTrackedMethod([-1, 0, 1], [0, 1, 3])
        >>> left.merge(CoverageByTrackedMethod([-1, 2, 1, 5], [0, 3, 3, 3]))
        >>> left.coverage
        [-1, 2, 2, 5]
        >>> [s.name for s in left.line_visit_status]
        ['NOT_COVERABLE', 'COVERED', 'COVERED', 'COVERED']
        """
        self.coverage = merge_visit_counts(self.coverage, other.coverage)
        self.line_visit_status = merge_visit_statuses(
            self.line_visit_status, other.line_visit_status
        )

    def line_analysis(self, lineno: int) -> ShortLineAnalysis:
        """Get the coverage of a single line, lines beyond the arrays are not coverable."""
        if lineno < len(self.coverage):
            return ShortLineAnalysis(
                self.coverage[lineno], self.line_visit_status[lineno]
            )
        return ShortLineAnalysis(NOT_COVERABLE_VISITS, LineVisitStatus.NOT_COVERABLE)

    @property
    def location(self) -> str:
        return "tracked method coverage"


class MetricMergeOrder(Enum):
    """How two values of a metric are combined."""

    HIGHER_IS_BETTER = "higher-is-better"
    LOWER_IS_BETTER = "lower-is-better"
    EXACTLY_EQUAL = "exactly-equal"


class MetricType(Enum):
    """The kind of a metric."""

    CODE_QUALITY = "code-quality"
    COVERAGE_ABSOLUTE = "coverage-absolute"
    COVERAGE_PERCENTUAL = "coverage-percentual"


class Metric(CoverageBase):
    r"""Represent a named quality measurement of a method.

    Args:
        name (str):
            The name of the metric.
        value (float, optional):
            The value, None if unknown.
        merge_order (MetricMergeOrder):
            How values of two reports are combined.
        metric_type (MetricType, optional):
            The kind of the metric.
        explanation_url (str, optional):
            Link to a description of the metric.
    """

    __slots__ = ("name", "value", "merge_order", "metric_type", "explanation_url")

    def __init__(
        self,
        name: str,
        value: Optional[float],
        merge_order: MetricMergeOrder,
        *,
        metric_type: MetricType = MetricType.CODE_QUALITY,
        explanation_url: Optional[str] = None,
    ) -> None:
        self.name = name
        self.value = value
        self.merge_order = merge_order
        self.metric_type = metric_type
        self.explanation_url = explanation_url

    def __repr__(self) -> str:
        return f"Metric({self.name!r}, {self.value!r}, {self.merge_order})"

    @classmethod
    def cyclomatic_complexity(cls, value: Optional[float]) -> Metric:
        """Create a cyclomatic complexity metric."""
        return cls(
            "Cyclomatic complexity",
            value,
            MetricMergeOrder.LOWER_IS_BETTER,
            explanation_url=CYCLOMATIC_COMPLEXITY_URL,
        )

    @classmethod
    def npath_complexity(cls, value: Optional[float]) -> Metric:
        """Create a NPath complexity metric."""
        return cls("NPath complexity", value, MetricMergeOrder.LOWER_IS_BETTER)

    @classmethod
    def crap_score(cls, value: Optional[float]) -> Metric:
        """Create a CRAP score metric."""
        return cls("CrapScore", value, MetricMergeOrder.LOWER_IS_BETTER)

    @classmethod
    def sequence_coverage(cls, value: Optional[float]) -> Metric:
        """Create a sequence (line) coverage metric."""
        return cls(
            "Line coverage",
            value,
            MetricMergeOrder.HIGHER_IS_BETTER,
            metric_type=MetricType.COVERAGE_PERCENTUAL,
            explanation_url=CODE_COVERAGE_URL,
        )

    @classmethod
    def branch_coverage(cls, value: Optional[float]) -> Metric:
        """Create a branch coverage metric."""
        return cls(
            "Branch coverage",
            value,
            MetricMergeOrder.HIGHER_IS_BETTER,
            metric_type=MetricType.COVERAGE_PERCENTUAL,
            explanation_url=CODE_COVERAGE_URL,
        )

    @classmethod
    def blocks_covered(cls, value: Optional[float]) -> Metric:
        """Create a metric for the number of covered blocks."""
        return cls(
            "Blocks covered",
            value,
            MetricMergeOrder.HIGHER_IS_BETTER,
            metric_type=MetricType.COVERAGE_ABSOLUTE,
        )

    @classmethod
    def blocks_not_covered(cls, value: Optional[float]) -> Metric:
        """Create a metric for the number of blocks which were not covered."""
        return cls(
            "Blocks not covered",
            value,
            MetricMergeOrder.LOWER_IS_BETTER,
            metric_type=MetricType.COVERAGE_ABSOLUTE,
        )

    def merge(self, other: Metric) -> None:
        """
        Merge Metric information according to the merge order.

        Do not use 'other' objects afterwards!

        Examples:
        >>> left = Metric("Complexity", 4, MetricMergeOrder.LOWER_IS_BETTER)
        >>> left.merge(Metric("Complexity", 3, MetricMergeOrder.LOWER_IS_BETTER))
        >>> left.value
        3
        >>> left = Metric("Complexity", None, MetricMergeOrder.HIGHER_IS_BETTER)
        >>> left.merge(Metric("Complexity", 3, MetricMergeOrder.HIGHER_IS_BETTER))
        >>> left.value
        3
        >>> left = Metric("Blocks", 4, MetricMergeOrder.EXACTLY_EQUAL)
        >>> left.merge(Metric("Blocks", 5, MetricMergeOrder.EXACTLY_EQUAL))
        >>> left.value is None
        True
        """
        if self.name != other.name:
            self.raise_merge_error(
                f"Name must be equal, got {self.name} and {other.name}.", other
            )
        if self.merge_order is not other.merge_order:
            self.raise_merge_error(
                f"Merge order must be equal, got {self.merge_order.value} and {other.merge_order.value}.",
                other,
            )

        if self.merge_order is MetricMergeOrder.EXACTLY_EQUAL:
            if self.value != other.value:
                if self.value is not None and other.value is not None:
                    LOGGER.warning(
                        f"{self.location} has conflicting values {self.value} and {other.value}, value is dropped."
                    )
                self.value = None
        elif self.value is None:
            self.value = other.value
        elif other.value is not None:
            if self.merge_order is MetricMergeOrder.HIGHER_IS_BETTER:
                self.value = max(self.value, other.value)
            else:
                self.value = min(self.value, other.value)

    @property
    def key(self) -> str:
        """Get the key used for the dictionary to unique identify the metric."""
        return self.name

    @property
    def location(self) -> str:
        return f"metric {self.name!r}"


MethodMetricKeyType = tuple[str, Optional[int]]


class MethodMetric(CoverageBase):
    r"""Represent the metrics of a single method or property.

    Args:
        name (str):
            The full name of the code element.
        short_name (str):
            The name used for display.
        metrics (list of Metric):
            The metrics, in the order of the report.
        line (int, optional):
            The first line of the code element.
    """

    __slots__ = ("name", "short_name", "_metrics", "line")

    def __init__(
        self,
        name: str,
        short_name: Optional[str] = None,
        metrics: Iterable[Metric] = (),
        line: Optional[int] = None,
    ) -> None:
        self.name = name
        self.short_name = name if short_name is None else short_name
        self.line = line
        self._metrics = CoverageDict[str, Metric]()
        self.add_metrics(metrics)

    def __repr__(self) -> str:
        return f"MethodMetric({self.name!r}, line={self.line})"

    @property
    def metrics(self) -> list[Metric]:
        """Get the metrics in insertion order."""
        return list(self._metrics.values())

    def add_metric(self, metric: Metric) -> None:
        """Add a metric, merge if a metric with the same name exists."""
        if metric.key in self._metrics:
            self._metrics[metric.key].merge(metric)
        else:
            self._metrics[metric.key] = metric

    def add_metrics(self, metrics: Iterable[Metric]) -> None:
        """Add several metrics."""
        for metric in metrics:
            self.add_metric(metric)

    def merge(self, other: MethodMetric) -> None:
        """
        Merge the metrics of the same method from two reports.

        Do not use 'other' objects afterwards!

        Precondition: both objects have the same key.
        """
        if self.key != other.key:
            self.raise_merge_error("Name and line must be equal.", other)
        self._metrics.merge(other._metrics)  # pylint: disable=protected-access

    @property
    def key(self) -> MethodMetricKeyType:
        """Get the key used to find the same method in another report."""
        return (self.name, self.line)

    @property
    def location(self) -> str:
        return (
            f"method {self.name!r}"
            if self.line is None
            else f"method {self.name!r} (line {self.line})"
        )


class CodeElementType(Enum):
    """The kind of a code element."""

    METHOD = "method"
    PROPERTY = "property"


class CodeElement(CoverageBase):
    r"""Represent a named source region like a method or property.

    Args:
        name (str):
            The name of the element.
        element_type (CodeElementType):
            The kind of the element.
        first_line (int):
            The first line of the element.
        last_line (int):
            The last line of the element (inclusive).
        coverage_quota (float, optional):
            The line coverage of the element in percent.
    """

    __slots__ = ("name", "element_type", "first_line", "last_line", "coverage_quota")

    def __init__(
        self,
        name: str,
        element_type: CodeElementType,
        first_line: int,
        last_line: int,
        coverage_quota: Optional[float] = None,
    ) -> None:
        self.name = name
        self.element_type = element_type
        if first_line <= 0:
            self.raise_data_error("First line must be a positive value.")
        if last_line < first_line:
            self.raise_data_error(
                f"Last line {last_line} must not be less than first line {first_line}."
            )
        self.first_line = first_line
        self.last_line = last_line
        self.coverage_quota = coverage_quota

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodeElement):
            return NotImplemented
        return (
            self.name == other.name
            and self.element_type is other.element_type
            and self.first_line == other.first_line
            and self.last_line == other.last_line
        )

    def __hash__(self) -> int:
        return hash((self.name, self.element_type, self.first_line, self.last_line))

    def __repr__(self) -> str:
        return f"CodeElement({self.name!r}, {self.first_line}-{self.last_line}, {self.coverage_quota})"

    @property
    def full_name(self) -> str:
        """Get the name including the kind of the element."""
        return f"{self.element_type.value} {self.name}"

    def __lt__(self, other: CodeElement) -> bool:
        return (self.first_line, self.name) < (other.first_line, other.name)

    @property
    def location(self) -> str:
        return f"{self.element_type.value} {self.name!r}"

    @property
    def is_covered(self) -> bool:
        """Return True if at least one line of the element was visited."""
        return self.coverage_quota is not None and self.coverage_quota > 0.0

    @property
    def is_fully_covered(self) -> bool:
        """Return True if all coverable lines of the element were visited."""
        return self.coverage_quota == 100.0


class CodeFile(CoverageBase):
    r"""Represent coverage information about one source file.

    Args:
        path (str):
            The path of the file, used as identity.
        line_visits (list of int):
            Visits per line number, ``-1`` for lines which are not coverable.
        line_visit_status (list of LineVisitStatus):
            Status per line number, same length as ``line_visits``.
        branches_by_line (dict of int to list of Branch, optional):
            The branches per line number, None if branch coverage isn't tracked.
    """

    __slots__ = (
        "path",
        "line_visits",
        "line_visit_status",
        "branches_by_line",
        "_method_metrics",
        "_code_elements",
        "_coverage_by_test_method",
        "_total_lines",
    )

    def __init__(
        self,
        path: str,
        line_visits: Sequence[int],
        line_visit_status: Sequence[LineVisitStatus],
        branches_by_line: Optional[Mapping[int, Iterable[Branch]]] = None,
    ) -> None:
        self.path = path
        if len(line_visits) != len(line_visit_status):
            self.raise_data_error(
                f"Got {len(line_visits)} visit counts but {len(line_visit_status)} line states."
            )
        self.line_visits = list(line_visits)
        self.line_visit_status = [LineVisitStatus(s) for s in line_visit_status]
        self.branches_by_line: Optional[BranchesByLine] = (
            None if branches_by_line is None else _branches_by_line(branches_by_line)
        )
        self._method_metrics = list[MethodMetric]()
        self._code_elements = list[CodeElement]()
        self._coverage_by_test_method = dict[TestMethod, CoverageByTrackedMethod]()
        self._total_lines: Optional[int] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodeFile):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"CodeFile({self.path!r})"

    @property
    def location(self) -> str:
        return self.path

    @property
    def coverable_lines(self) -> int:
        """Number of lines with executable code."""
        return sum(1 for status in self.line_visit_status if status.is_coverable)

    @property
    def covered_lines(self) -> int:
        """Number of lines which were visited at least partially."""
        return sum(1 for status in self.line_visit_status if status.is_covered)

    @property
    def uncovered_lines(self) -> int:
        """Number of coverable lines which were not visited."""
        return self.coverable_lines - self.covered_lines

    @property
    def covered_branches(self) -> Optional[int]:
        """Number of visited branches, None if branch coverage isn't tracked."""
        if self.branches_by_line is None:
            return None
        return sum(
            1
            for branches in self.branches_by_line.values()
            for branch in branches.values()
            if branch.is_visited
        )

    @property
    def total_branches(self) -> Optional[int]:
        """Number of branches, None if branch coverage isn't tracked."""
        if self.branches_by_line is None:
            return None
        return sum(len(branches) for branches in self.branches_by_line.values())

    @property
    def total_lines(self) -> Optional[int]:
        """Number of physical lines, known after the first successful analysis."""
        return self._total_lines

    @property
    def method_metrics(self) -> tuple[MethodMetric, ...]:
        """Get the method metrics in insertion order."""
        return tuple(self._method_metrics)

    @property
    def code_elements(self) -> tuple[CodeElement, ...]:
        """Get the code elements in insertion order."""
        return tuple(self._code_elements)

    @property
    def test_methods(self) -> tuple[TestMethod, ...]:
        """Get the tracked test methods which contributed coverage."""
        return tuple(self._coverage_by_test_method)

    def coverage_by_test_method(self, test_method: TestMethod) -> Optional[CoverageByTrackedMethod]:
        """Get the coverage of a tracked test method, None if the test didn't cover this file."""
        return self._coverage_by_test_method.get(test_method)

    @property
    def covered_code_elements(self) -> int:
        """Number of code elements with at least one visited line."""
        return sum(1 for element in self._code_elements if element.is_covered)

    @property
    def full_covered_code_elements(self) -> int:
        """Number of code elements where all coverable lines were visited."""
        return sum(1 for element in self._code_elements if element.is_fully_covered)

    @property
    def total_code_elements(self) -> int:
        """Number of code elements."""
        return len(self._code_elements)

    @property
    def stats(self) -> SummarizedStats:
        """Create a coverage statistic of the file."""
        return SummarizedStats(
            line=CoverageStat(self.covered_lines, self.coverable_lines),
            branch=CoverageStat(self.covered_branches or 0, self.total_branches or 0),
            code_element=CoverageStat(
                self.covered_code_elements, self.total_code_elements
            ),
        )

    def add_method_metric(self, method_metric: MethodMetric) -> None:
        """Add the metrics of a method, duplicates are only resolved by merge."""
        self._method_metrics.append(method_metric)

    def add_code_element(self, code_element: CodeElement) -> None:
        """Add a code element."""
        self._code_elements.append(code_element)

    def add_coverage_by_test_method(
        self, test_method: TestMethod, coverage: CoverageByTrackedMethod
    ) -> CoverageByTrackedMethod:
        """Add the coverage of a tracked test method, merge if needed.

        Returns the coverage which is stored for the test method.
        """
        if test_method in self._coverage_by_test_method:
            self._coverage_by_test_method[test_method].merge(coverage)
        else:
            self._coverage_by_test_method[test_method] = coverage

        return self._coverage_by_test_method[test_method]

    def coverage_quota(self, first_line: int, last_line: int) -> Optional[float]:
        """Get the line coverage in percent of the inclusive line range.

        Returns None if the range is invalid or has no coverable line.
        """
        if (
            first_line < 0
            or last_line < 0
            or first_line >= len(self.line_visit_status)
            or last_line >= len(self.line_visit_status)
            or first_line > last_line
        ):
            return None

        stat = CoverageStat.new_empty()
        for status in self.line_visit_status[first_line : last_line + 1]:
            if status.is_coverable:
                stat.total += 1
                if status.is_covered:
                    stat.covered += 1

        return stat.percent

    def merge(self, other: CodeFile) -> None:
        """
        Merge CodeFile information.

        Do not use 'other' objects afterwards!

        Precondition: both objects have same path.

        Code elements are not merged, they only depend on the source
        which is identical for both reports.
        """

        if self.path != other.path:
            self.raise_merge_error("Path must be equal.", other)

        if other is self:
            other = copy.deepcopy(self)

        LOGGER.debug(f"Merge coverage data for {self.path}")

        line_visits = list[int]()
        line_visit_status = list[LineVisitStatus]()
        for visits, status in zip(
            merge_visit_counts(self.line_visits, other.line_visits),
            merge_visit_statuses(self.line_visit_status, other.line_visit_status),
        ):
            visits, status = _reconcile_line(visits, status)
            line_visits.append(visits)
            line_visit_status.append(status)
        self.line_visits = line_visits
        self.line_visit_status = line_visit_status

        self.__merge_branches(other.branches_by_line)
        self.__merge_method_metrics(other._method_metrics)

        for test_method, coverage in other._coverage_by_test_method.items():
            self.add_coverage_by_test_method(test_method, coverage)

        if self._total_lines is None:
            self._total_lines = other._total_lines

        other.branches_by_line = None
        other._method_metrics = []
        other._coverage_by_test_method = {}

    def __merge_branches(self, branches_by_line: Optional[BranchesByLine]) -> None:
        """Union the branches by line, same identifiers keep the higher visit count."""
        # If branch coverage is not known for the other side keep ours.
        if branches_by_line is None:
            return

        if self.branches_by_line is None:
            self.branches_by_line = BranchesByLine()

        for lineno, branches in branches_by_line.items():
            if lineno in self.branches_by_line:
                self.branches_by_line[lineno].merge(branches)
            else:
                self.branches_by_line[lineno] = branches

    def __merge_method_metrics(self, method_metrics: list[MethodMetric]) -> None:
        """Merge metrics of the same method, unmatched ones are appended."""
        by_key = dict[MethodMetricKeyType, MethodMetric]()
        for method_metric in self._method_metrics:
            by_key.setdefault(method_metric.key, method_metric)

        for method_metric in method_metrics:
            if (existing := by_key.get(method_metric.key)) is not None:
                existing.merge(method_metric)
            else:
                self._method_metrics.append(method_metric)
                by_key[method_metric.key] = method_metric

    def line_branches(self, lineno: int) -> Optional[list[Branch]]:
        """Get the branches of a line, None if the line has no branches."""
        if self.branches_by_line is None:
            return None
        if (branches := self.branches_by_line.get(lineno)) is None or not branches:
            return None
        return list(branches.values())

    def analyze_file(self, source_reader: Optional[SourceReader] = None) -> FileAnalysis:
        """Join the coverage with the physical source of the file.

        A file which can't be read results in an analysis with an error
        and without lines. The number of lines of the first successful
        analysis is kept as ``total_lines``.
        """
        reader = read_source_lines if source_reader is None else source_reader
        try:
            lines = reader(self.path)
        except (OSError, ValueError) as e:
            # ValueError is raised by open() for a path with a null byte
            LOGGER.warning(f"Can't read file: {e}")
            reason = getattr(e, "strerror", None) or e
            return FileAnalysis(
                self.path, error=f"Can't read file {self.path!r}: {reason}"
            )

        if self._total_lines is None:
            self._total_lines = len(lines)

        analysis = FileAnalysis(self.path)
        for lineno, line_content in enumerate(lines, 1):
            line_visits: Optional[int] = None
            line_visit_status = LineVisitStatus.NOT_COVERABLE
            if lineno < len(self.line_visits):
                line_visits = self.line_visits[lineno]
                line_visit_status = self.line_visit_status[lineno]

            covered_branches: Optional[int] = None
            total_branches: Optional[int] = None
            if (branches := self.line_branches(lineno)) is not None:
                covered_branches = sum(1 for branch in branches if branch.is_visited)
                total_branches = len(branches)

            analysis.add_line(
                LineAnalysis(
                    line_number=lineno,
                    line_content=line_content,
                    line_visits=line_visits,
                    line_visit_status=line_visit_status,
                    covered_branches=covered_branches,
                    total_branches=total_branches,
                    line_coverage_by_test_method={
                        test_method: coverage.line_analysis(lineno)
                        for test_method, coverage in self._coverage_by_test_method.items()
                    },
                )
            )

        return analysis
