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
import os

import pytest

from covreport.data_model.coverage import (
    Branch,
    CodeFile,
    CoverageByTrackedMethod,
    LineVisitStatus,
    TestMethod,
)
from covreport.logging import configure_logging
from covreport.utils import find_source_file, source_reader

configure_logging()

NC = LineVisitStatus.NOT_COVERABLE
NO = LineVisitStatus.NOT_COVERED
PC = LineVisitStatus.PARTIALLY_COVERED
CO = LineVisitStatus.COVERED


@pytest.fixture(name="program")
def fixture_program(tmp_path) -> str:
    path = tmp_path / "Program.cs"
    path.write_text(
        "\n".join(f"// line {lineno}" for lineno in range(1, 85)) + "\n",
        encoding="utf-8",
    )
    return str(path)


def test_existing_file(program: str) -> None:
    codefile = CodeFile(program, [-2, -1, 0, 1, 2], [NC, NC, NO, PC, CO])
    assert codefile.total_lines is None

    analysis = codefile.analyze_file()

    assert analysis.error is None
    assert not analysis.has_error
    assert analysis.path == program
    assert codefile.total_lines == 84
    assert len(analysis.lines) == 84

    lines = [
        (line.line_number, line.line_visits, line.line_visit_status)
        for line in analysis.lines[:5]
    ]
    assert lines == [
        (1, -1, NC),
        (2, 0, NO),
        (3, 1, PC),
        (4, 2, CO),
        (5, None, NC),
    ]
    assert analysis.lines[0].line_content == "// line 1"
    assert analysis.lines[-1].line_visits is None


def test_existing_file_with_tracked_methods(program: str) -> None:
    codefile = CodeFile(program, [-2, -1, 0, 1], [NC, NC, NO, CO])
    test_method = TestMethod("TestFull", "Test")
    codefile.add_coverage_by_test_method(
        test_method, CoverageByTrackedMethod([-2, 2, -1, 0], [NC, CO, NC, NO])
    )

    analysis = codefile.analyze_file()

    first = analysis.lines[0].line_coverage_by_test_method[test_method]
    assert first.line_visits == 2
    assert first.line_visit_status is CO
    beyond = analysis.lines[10].line_coverage_by_test_method[test_method]
    assert beyond.line_visits == -1
    assert beyond.line_visit_status is NC


def test_branches_per_line(program: str) -> None:
    codefile = CodeFile(
        program,
        [-1, 1, 1],
        [NC, PC, CO],
        {1: [Branch("1_0", 1), Branch("1_1", 0)]},
    )

    analysis = codefile.analyze_file()

    assert (analysis.lines[0].covered_branches, analysis.lines[0].total_branches) == (1, 2)
    assert analysis.lines[1].covered_branches is None
    assert analysis.lines[1].total_branches is None


def test_non_existing_file(tmp_path, caplog: pytest.LogCaptureFixture) -> None:
    codefile = CodeFile(str(tmp_path / "Other.cs"), [-2, -1, 0, 1], [NC, NC, NO, CO])
    assert codefile.total_lines is None

    analysis = codefile.analyze_file()

    assert analysis.error is not None
    assert analysis.has_error
    assert analysis.path == codefile.path
    assert analysis.lines == []
    assert codefile.total_lines is None
    assert caplog.record_tuples[-1][1] == logging.WARNING
    assert "Can't read file" in caplog.record_tuples[-1][2]


def test_reader_errors_are_reported() -> None:
    def failing_reader(path: str) -> list[str]:
        raise PermissionError(13, "Permission denied", path)

    codefile = CodeFile("Secret.cs", [-1, 1], [NC, CO])

    analysis = codefile.analyze_file(failing_reader)

    assert analysis.error is not None
    assert "Permission denied" in analysis.error
    assert codefile.total_lines is None


def test_malformed_path(caplog: pytest.LogCaptureFixture) -> None:
    codefile = CodeFile("bad\x00path.cs", [-1, 1], [NC, CO])

    analysis = codefile.analyze_file()

    assert analysis.error is not None
    assert analysis.lines == []
    assert codefile.total_lines is None
    assert caplog.record_tuples[-1][1] == logging.WARNING


def test_total_lines_stable_after_merge(program: str) -> None:
    codefile = CodeFile(program, [-1, 1], [NC, CO])
    codefile.analyze_file()

    codefile.merge(CodeFile(program, [-1] + [1] * 99, [NC] + [CO] * 99))

    assert codefile.total_lines == 84
    assert len(codefile.line_visits) == 100


def test_total_lines_from_first_successful_analysis(tmp_path) -> None:
    path = tmp_path / "Growing.cs"
    codefile = CodeFile(str(path), [-1, 1], [NC, CO])

    codefile.analyze_file()
    assert codefile.total_lines is None

    path.write_text("a\nb\nc\n", encoding="utf-8")
    codefile.analyze_file()
    assert codefile.total_lines == 3

    path.write_text("a\nb\nc\nd\ne\n", encoding="utf-8")
    analysis = codefile.analyze_file()
    assert codefile.total_lines == 3
    assert len(analysis.lines) == 5


def test_merge_adopts_total_lines(program: str) -> None:
    analyzed = CodeFile(program, [-1, 1], [NC, CO])
    analyzed.analyze_file()
    codefile = CodeFile(program, [-1, 0], [NC, NO])

    codefile.merge(analyzed)

    assert codefile.total_lines == 84


def test_source_directories(tmp_path) -> None:
    source_dir = tmp_path / "checkout"
    (source_dir / "src").mkdir(parents=True)
    (source_dir / "src" / "Program.cs").write_text("first\nsecond\n", encoding="utf-8")
    report_path = os.path.join("C:\\build\\agent", "src", "Program.cs")

    assert find_source_file(report_path, [str(source_dir)]) == str(
        source_dir / "src" / "Program.cs"
    )

    codefile = CodeFile(report_path, [-1, 1], [NC, CO])
    analysis = codefile.analyze_file(source_reader(source_directories=[str(source_dir)]))

    assert [line.line_content for line in analysis.lines] == ["first", "second"]


def test_source_encoding(tmp_path) -> None:
    path = tmp_path / "Latin.cs"
    path.write_bytes("// caf\xe9\n".encode("latin-1"))
    codefile = CodeFile(str(path), [-1], [NC])

    analysis = codefile.analyze_file(source_reader("latin-1"))

    assert analysis.lines[0].line_content == "// caf\xe9"
