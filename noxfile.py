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

import nox


DEFAULT_TEST_DIRECTORIES = ["src", "tests"]
DEFAULT_LINT_ARGUMENTS = ["noxfile.py", "setup.py"] + DEFAULT_TEST_DIRECTORIES


@nox.session(python=False)
def qa(session: nox.Session) -> None:
    """Run the quality tests."""
    for session_id in ["lint", "tests"]:
        session.log(f"Notify session {session_id}")
        session.notify(session_id, [])


@nox.session(python=False)
def lint(session: nox.Session) -> None:
    """Run the linters."""
    session.notify("ruff_check")
    session.notify("ruff_format")
    session.notify("mypy")


@nox.session
def ruff_check(session: nox.Session) -> None:
    """Run ruff check command."""
    session.install("ruff")
    if session.posargs:
        args = session.posargs
    else:
        args = ["."]
    session.run("ruff", "check", *args)


@nox.session
def ruff_format(session: nox.Session) -> None:
    """Run ruff format command."""
    session.install("ruff")
    if session.posargs:
        args = session.posargs
    else:
        args = ["--diff", "."]
    session.run("ruff", "format", *args)


@nox.session
def mypy(session: nox.Session) -> None:
    """Run mypy command."""
    session.install("mypy", "nox", "pytest")
    session.install("-e", ".")
    if session.posargs:
        args = session.posargs
    else:
        args = DEFAULT_LINT_ARGUMENTS
    session.run("mypy", *args)


@nox.session
def tests(session: nox.Session) -> None:
    """Run the unit tests and the doctests."""
    session.install("-e", ".[test]")

    args = ["-m", "pytest", "--doctest-modules"]
    args += session.posargs
    if "--" not in args:
        args += ["--"] + DEFAULT_TEST_DIRECTORIES

    session.run("python", *args)
