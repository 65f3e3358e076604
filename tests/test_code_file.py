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

# pylint: disable=missing-function-docstring,missing-module-docstring
import logging

import pytest

from covreport.data_model.coverage import (
    Branch,
    CodeFile,
    CoverageByTrackedMethod,
    LineVisitStatus,
    MethodMetric,
    Metric,
    TestMethod,
)
from covreport.exceptions import (
    CovreportDataAssertionError,
    CovreportMergeAssertionError,
)
from covreport.logging import configure_logging

configure_logging()

PATH = "C:\\temp\\Program.cs"

NC = LineVisitStatus.NOT_COVERABLE
NO = LineVisitStatus.NOT_COVERED
PC = LineVisitStatus.PARTIALLY_COVERED
CO = LineVisitStatus.COVERED

VISITS_BLOCKS = [-1, -1, -1, 0, 0, 0, 1, 1, 1]
STATUS_BLOCKS = [NC, NC, NC, NO, NO, NO, CO, CO, CO]
VISITS_REPEATED = [-1, 0, 1] * 4
STATUS_REPEATED = [NC, NO, CO] * 4


def branches_one() -> dict[int, list[Branch]]:
    return {
        1: [Branch("1", 1), Branch("2", 0)],
        2: [Branch("3", 0), Branch("4", 2)],
    }


def branches_two() -> dict[int, list[Branch]]:
    return {
        1: [Branch("1", 4), Branch("5", 3)],
        3: [Branch("3", 0), Branch("4", 2)],
    }


def test_constructor() -> None:
    codefile = CodeFile(PATH, [-1, 0, 2], [NC, NO, CO])

    assert codefile.coverable_lines == 2
    assert codefile.covered_lines == 1
    assert codefile.uncovered_lines == 1
    assert codefile.covered_branches is None
    assert codefile.total_branches is None
    assert codefile.total_lines is None


def test_constructor_with_branches() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_one())

    assert codefile.covered_branches == 2
    assert codefile.total_branches == 4


def test_constructor_with_empty_branch_map() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, {})

    assert codefile.covered_branches == 0
    assert codefile.total_branches == 0


def test_constructor_duplicate_branch_identifier_keeps_maximum() -> None:
    codefile = CodeFile(
        PATH, VISITS_BLOCKS, STATUS_BLOCKS, {1: [Branch("1", 0), Branch("1", 3)]}
    )

    assert codefile.total_branches == 1
    assert codefile.covered_branches == 1


def test_constructor_copies_input() -> None:
    visits = [-1, 0, 2]
    branches = branches_one()
    codefile = CodeFile(PATH, visits, [NC, NO, CO], branches)
    codefile.merge(CodeFile(PATH, [-1, 3, 2], [NC, CO, CO], branches_two()))

    assert visits == [-1, 0, 2]
    assert branches[1][0].visit_count == 1


def test_constructor_length_mismatch() -> None:
    with pytest.raises(CovreportDataAssertionError, match="2 visit counts but 3"):
        CodeFile(PATH, [-1, 0], [NC, NO, CO])


def test_negative_branch_visits() -> None:
    with pytest.raises(CovreportDataAssertionError, match="negative"):
        Branch("1", -1)


def test_branch_equality_ignores_visits() -> None:
    assert Branch("1", 0) == Branch("1", 5)
    assert Branch("1", 0) != Branch("2", 0)
    assert len({Branch("1", 0), Branch("1", 5)}) == 1


def test_merge_one_method_metric_is_stored() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)
    method_metric = MethodMetric("Test")
    codefile.add_method_metric(method_metric)

    codefile.merge(CodeFile(PATH, VISITS_REPEATED, STATUS_REPEATED))

    assert codefile.method_metrics == (method_metric,)


def test_merge_method_metrics_by_name_and_line() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)
    codefile.add_method_metric(
        MethodMetric("Run()", metrics=[Metric.cyclomatic_complexity(4)], line=3)
    )
    other = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)
    other.add_method_metric(
        MethodMetric("Run()", metrics=[Metric.cyclomatic_complexity(2)], line=3)
    )
    other.add_method_metric(
        MethodMetric("Run()", metrics=[Metric.cyclomatic_complexity(7)], line=9)
    )

    codefile.merge(other)

    assert [(m.name, m.line) for m in codefile.method_metrics] == [
        ("Run()", 3),
        ("Run()", 9),
    ]
    assert [m.metrics[0].value for m in codefile.method_metrics] == [2, 7]


def test_merge_other_has_no_branches() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_one())

    codefile.merge(CodeFile(PATH, VISITS_REPEATED, STATUS_REPEATED))

    assert codefile.covered_branches == 2
    assert codefile.total_branches == 4


def test_merge_target_has_no_branches() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)

    codefile.merge(CodeFile(PATH, VISITS_REPEATED, STATUS_REPEATED, branches_one()))

    assert codefile.covered_branches == 2
    assert codefile.total_branches == 4


def test_merge_equal_length() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)
    other = CodeFile(PATH, [-1, 0, 1] * 3, [NC, NO, CO] * 3)
    test_method = TestMethod("TestFull", "Test")
    other.add_coverage_by_test_method(
        test_method, CoverageByTrackedMethod(VISITS_BLOCKS, STATUS_BLOCKS)
    )

    codefile.merge(other)

    assert codefile.coverable_lines == 8
    assert codefile.covered_lines == 5
    assert codefile.covered_branches is None
    assert codefile.total_branches is None
    assert test_method in codefile.test_methods


def test_merge_longer_coverage_array() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_one())
    codefile.add_coverage_by_test_method(
        TestMethod("TestFull", "Test"),
        CoverageByTrackedMethod(VISITS_BLOCKS, STATUS_BLOCKS),
    )
    other = CodeFile(PATH, VISITS_REPEATED, STATUS_REPEATED, branches_two())
    other.add_coverage_by_test_method(
        TestMethod("TestFull", "Test"),
        CoverageByTrackedMethod(VISITS_REPEATED, STATUS_REPEATED),
    )

    codefile.merge(other)

    assert codefile.coverable_lines == 10
    assert codefile.covered_lines == 6
    assert codefile.covered_branches == 4
    assert codefile.total_branches == 7
    assert len(codefile.line_visits) == 12
    assert codefile.test_methods == (TestMethod("TestFull", "Test"),)


def test_merge_line_visits() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)

    codefile.merge(CodeFile(PATH, VISITS_REPEATED, STATUS_REPEATED))

    # Both sides counted: add, one side not coverable: adopt the other side
    assert codefile.line_visits == [-1, 0, 1, 0, 0, 1, 1, 1, 2, -1, 0, 1]
    assert codefile.line_visit_status == [NC, NO, CO, NO, NO, CO, CO, CO, CO, NC, NO, CO]


def test_merge_branch_visits_take_maximum() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_one())

    codefile.merge(CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_two()))

    assert codefile.branches_by_line is not None
    assert {
        lineno: sorted((b.identifier, b.visit_count) for b in branches.values())
        for lineno, branches in codefile.branches_by_line.items()
    } == {
        1: [("1", 4), ("2", 0), ("5", 3)],
        2: [("3", 0), ("4", 2)],
        3: [("3", 0), ("4", 2)],
    }


def test_merge_corrects_status_mismatch() -> None:
    codefile = CodeFile(PATH, [-1, -1, 3, 0], [NC, NO, NC, NC])

    codefile.merge(CodeFile(PATH, [-1], [NC]))

    assert codefile.line_visits == [-1, 0, 3, 0]
    assert codefile.line_visit_status == [NC, NO, CO, NO]


def test_merge_keeps_sentinel_of_index_zero() -> None:
    codefile = CodeFile(PATH, [-2, -1, 0], [NC, NC, NO])

    codefile.merge(CodeFile(PATH, [-2, 1, 0], [NC, CO, NO]))

    assert codefile.line_visits == [-2, 1, 0]
    assert codefile.line_visit_status == [NC, CO, NO]


def test_merge_with_itself_doubles_visits() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_one())

    codefile.merge(codefile)

    assert codefile.line_visits == [-1, -1, -1, 0, 0, 0, 2, 2, 2]
    assert codefile.line_visit_status == STATUS_BLOCKS
    assert codefile.total_branches == 4
    assert codefile.covered_branches == 2


def test_merge_different_path() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)

    with pytest.raises(CovreportMergeAssertionError) as exc_info:
        codefile.merge(CodeFile("C:\\temp\\Other.cs", VISITS_BLOCKS, STATUS_BLOCKS))

    assert "Path must be equal" in str(exc_info.value)
    assert "C:\\temp\\Other.cs" in str(exc_info.value)


def test_merge_logs_debug_message(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="covreport")
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)

    codefile.merge(CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS))

    assert f"Merge coverage data for {PATH}" in caplog.text


def test_add_coverage_by_test_method_twice_merges() -> None:
    codefile = CodeFile(PATH, [], [])
    test_method = TestMethod("TestFull", "Test")

    codefile.add_coverage_by_test_method(
        test_method,
        CoverageByTrackedMethod(
            [-1, -1, -1, -1, 0, 0, 0, 1, 1, 1],
            [NC, NC, NC, NC, NO, NO, NO, CO, CO, CO],
        ),
    )
    coverage = codefile.add_coverage_by_test_method(
        test_method,
        CoverageByTrackedMethod(
            [-1, 0, 1, -1, 1, 0, 1, -1, 1, 0],
            [NC, NO, CO, NC, CO, NO, CO, NC, CO, NO],
        ),
    )

    assert codefile.test_methods == (test_method,)
    assert codefile.coverage_by_test_method(test_method) is coverage
    assert coverage.coverage[1:] == [0, 1, -1, 1, 0, 1, 1, 2, 1]
    assert coverage.line_visit_status[1:] == [NO, CO, NC, CO, NO, CO, CO, CO, CO]


def test_tracked_method_length_mismatch() -> None:
    with pytest.raises(CovreportDataAssertionError):
        CoverageByTrackedMethod([-1, 0], [NC])


@pytest.mark.parametrize(
    "first_line,last_line,expected",
    [
        (1, 8, 50.0),
        (2, 7, 40.0),
        (3, 5, 0.0),
        (6, 8, 100.0),
        (0, 2, None),
        (5, 3, None),
        (1, 9, None),
        (-1, 4, None),
    ],
)
def test_coverage_quota(first_line: int, last_line: int, expected: float) -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS)

    assert codefile.coverage_quota(first_line, last_line) == expected


@pytest.mark.parametrize(
    "visits,statuses,expected",
    [
        ([-1, 1, 0, 0], [NC, CO, NO, NO], 33.3),
        ([-1, 1, 1, 0], [NC, CO, CO, NO], 66.6),
        ([-1] + [1] * 998 + [0], [NC] + [CO] * 998 + [NO], 99.8),
    ],
)
def test_coverage_quota_truncates_to_one_decimal(visits, statuses, expected) -> None:
    codefile = CodeFile(PATH, visits, statuses)

    assert codefile.coverage_quota(1, len(visits) - 1) == expected


def test_partially_covered_lines_are_covered() -> None:
    codefile = CodeFile(PATH, [-1, 1, 1, 0], [NC, PC, CO, NO])

    assert codefile.covered_lines == 2
    assert codefile.coverage_quota(1, 3) == 66.6


def test_stats() -> None:
    codefile = CodeFile(PATH, VISITS_BLOCKS, STATUS_BLOCKS, branches_one())
    stats = codefile.stats

    assert (stats.line.covered, stats.line.total) == (3, 6)
    assert (stats.branch.covered, stats.branch.total) == (2, 4)
    assert stats.line.percent == 50.0


def test_equality() -> None:
    codefile1 = CodeFile(PATH, [], [])
    codefile2 = CodeFile(PATH, [], [])
    codefile3 = CodeFile("C:\\temp\\Other.cs", [], [])

    assert codefile1 == codefile2
    assert hash(codefile1) == hash(codefile2)
    assert codefile1 != codefile3
    assert codefile1 != None  # noqa: E711
    assert codefile1 != object()
