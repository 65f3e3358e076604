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
Shared machinery of the format adapters.

A format adapter translates one coverage report into :class:`FileInput`
records, one per class and file, and hands them to
:func:`build_parser_result`. Everything here is stateless, the files
of an assembly are built in parallel.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..data_model.container import Assembly, Class, ParserResult
from ..data_model.coverage import (
    Branch,
    CodeElement,
    CodeElementType,
    CodeFile,
    CoverageByTrackedMethod,
    LineVisitStatus,
    MethodMetric,
    Metric,
    TestMethod,
)
from ..data_model.merging import NOT_COVERABLE_VISITS
from ..exceptions import CovreportDataAssertionError
from ..filter import ElementFilter
from ..options import Options
from ..workers import Workers

LOGGER = logging.getLogger("covreport")


@dataclass
class MethodInput:
    """A method or property as declared by a report."""

    name: str
    first_line: int
    short_name: Optional[str] = None
    element_type: CodeElementType = CodeElementType.METHOD
    cyclomatic_complexity: Optional[float] = None
    metrics: list[Metric] = field(default_factory=list)


@dataclass
class TestMethodInput:
    """The line visits of a single tracked test within one file."""

    __test__ = False  # not a pytest test class

    test_method: TestMethod
    visits_by_line: Mapping[int, int]


@dataclass
class FileInput:
    """The coverage of one file of a class as reported by a format adapter.

    ``visits_by_line`` only holds the coverable lines,
    ``branches_by_line`` is None if the format doesn't track branches.
    """

    path: str
    class_name: str
    visits_by_line: Mapping[int, int]
    branches_by_line: Optional[Mapping[int, Sequence[Branch]]] = None
    methods: list[MethodInput] = field(default_factory=list)
    test_methods: list[TestMethodInput] = field(default_factory=list)
    number_of_lines: Optional[int] = None


def line_status(visits: int, branches: Optional[Sequence[Branch]] = None) -> LineVisitStatus:
    """Get the status of a line from its visit count and branches.

    >>> line_status(-1)
    <LineVisitStatus.NOT_COVERABLE: 0>
    >>> line_status(0)
    <LineVisitStatus.NOT_COVERED: 1>
    >>> line_status(2, [Branch("1_0", 1), Branch("1_1", 0)])
    <LineVisitStatus.PARTIALLY_COVERED: 2>
    >>> line_status(2, [Branch("1_0", 1), Branch("1_1", 3)])
    <LineVisitStatus.COVERED: 3>
    """
    if visits < 0:
        return LineVisitStatus.NOT_COVERABLE
    if visits == 0:
        return LineVisitStatus.NOT_COVERED
    if branches and any(not branch.is_visited for branch in branches):
        return LineVisitStatus.PARTIALLY_COVERED
    return LineVisitStatus.COVERED


def build_line_arrays(
    visits_by_line: Mapping[int, int],
    branches_by_line: Optional[Mapping[int, Sequence[Branch]]] = None,
) -> tuple[list[int], list[LineVisitStatus]]:
    """Create the dense arrays indexed by line number.

    Index 0 and the lines without an entry are not coverable.
    Without any line the arrays are empty.

    >>> visits, statuses = build_line_arrays({1: 0, 3: 4})
    >>> visits
    [-1, 0, -1, 4]
    >>> [status.name for status in statuses]
    ['NOT_COVERABLE', 'NOT_COVERED', 'NOT_COVERABLE', 'COVERED']
    >>> build_line_arrays({})
    ([], [])
    """
    if not visits_by_line:
        return [], []

    if (first_line := min(visits_by_line)) < 1:
        raise CovreportDataAssertionError(
            f"Line numbers must be positive values, got {first_line}."
        )

    size = max(visits_by_line) + 1
    visits = [NOT_COVERABLE_VISITS] * size
    statuses = [LineVisitStatus.NOT_COVERABLE] * size
    for lineno, line_visits in visits_by_line.items():
        branches = None if branches_by_line is None else branches_by_line.get(lineno)
        visits[lineno] = max(line_visits, NOT_COVERABLE_VISITS)
        statuses[lineno] = line_status(line_visits, branches)

    return visits, statuses


def set_code_elements(
    codefile: CodeFile, methods: Iterable[MethodInput], number_of_lines: int
) -> None:
    """Add the code elements and the complexity metrics of the methods.

    Each element ends at the line before the next method,
    the last one at the end of the file.
    """
    sorted_methods = sorted(methods, key=lambda method: method.first_line)
    for method in sorted_methods:
        metrics = list(method.metrics)
        if method.cyclomatic_complexity is not None:
            metrics.insert(0, Metric.cyclomatic_complexity(method.cyclomatic_complexity))
        if metrics:
            codefile.add_method_metric(
                MethodMetric(method.name, method.short_name, metrics, line=method.first_line)
            )

    for index, method in enumerate(sorted_methods):
        last_line = number_of_lines
        if index < len(sorted_methods) - 1:
            last_line = sorted_methods[index + 1].first_line - 1
        last_line = max(last_line, method.first_line)
        # The coverage arrays may end before the last line of the file
        last_coverage_line = min(last_line, len(codefile.line_visit_status) - 1)

        codefile.add_code_element(
            CodeElement(
                method.name,
                method.element_type,
                method.first_line,
                last_line,
                codefile.coverage_quota(method.first_line, last_coverage_line),
            )
        )


def build_code_file(file_input: FileInput) -> CodeFile:
    """Create the coverage data of one file."""
    LOGGER.debug(f"Build coverage data of {file_input.path}")
    visits, statuses = build_line_arrays(
        file_input.visits_by_line, file_input.branches_by_line
    )
    codefile = CodeFile(file_input.path, visits, statuses, file_input.branches_by_line)

    number_of_lines = (
        len(visits) - 1
        if file_input.number_of_lines is None
        else file_input.number_of_lines
    )
    set_code_elements(codefile, file_input.methods, number_of_lines)

    for test_method_input in file_input.test_methods:
        test_visits, test_statuses = build_line_arrays(test_method_input.visits_by_line)
        codefile.add_coverage_by_test_method(
            test_method_input.test_method,
            CoverageByTrackedMethod(test_visits, test_statuses),
        )

    return codefile


def _build_code_file_job(
    index: int, file_input: FileInput, results: dict[int, CodeFile], **_: Any
) -> None:
    results[index] = build_code_file(file_input)


def build_assembly(
    name: str, file_inputs: Iterable[FileInput], options: Optional[Options] = None
) -> Assembly:
    """Create an assembly from the files of its classes.

    The files are built on a pool of ``options.parallel`` threads,
    they are added to their classes in the order of the input.
    """
    if options is None:
        options = Options.with_defaults()

    LOGGER.debug(f"Current assembly: {name}")
    class_filter = ElementFilter(options.class_filters)
    file_filter = ElementFilter(options.file_filters)
    included_inputs = [
        file_input
        for file_input in file_inputs
        if class_filter.is_element_included(file_input.class_name)
        and file_filter.is_element_included(file_input.path)
    ]

    with Workers(options.parallel, lambda: {"results": dict[int, CodeFile]()}) as pool:
        LOGGER.debug(f"Pool started with {pool.size()} threads")
        for index, file_input in enumerate(included_inputs):
            pool.add(_build_code_file_job, index, file_input)
        contexts = pool.wait()

    results = dict[int, CodeFile]()
    for context in contexts:
        results.update(context["results"])

    assembly = Assembly(name)
    for index, file_input in enumerate(included_inputs):
        cls = Class(file_input.class_name, assembly)
        cls.add_file(results[index])
        assembly.add_class(cls)

    return assembly


def build_parser_result(
    parser_name: str,
    assemblies_input: Mapping[str, Iterable[FileInput]],
    options: Optional[Options] = None,
    supports_branch_coverage: bool = False,
) -> ParserResult:
    """Create the result of a format adapter, the assemblies are sorted by name."""
    if options is None:
        options = Options.with_defaults()

    assembly_filter = ElementFilter(options.assembly_filters)
    assemblies = [
        build_assembly(name, file_inputs, options)
        for name, file_inputs in sorted(assemblies_input.items())
        if assembly_filter.is_element_included(name)
    ]

    return ParserResult(
        assemblies,
        supports_branch_coverage,
        parser_name,
        options.source_directories,
    )
