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

"""The containers which group the coverage of files by class and assembly."""

from __future__ import annotations
import logging
import os
import re
from typing import Iterable, Iterator, Optional

from .coverage import CodeFile, CoverageBase, MethodMetric
from .coverage_dict import CoverageDict
from .stats import CoverageStat, SummarizedStats

LOGGER = logging.getLogger("covreport")

GENERIC_ARITY_REGEX = re.compile(r"`(\d+)")
ASSEMBLY_SUFFIXES = (".dll", ".exe")


def _sum_or_none(values: Iterable[Optional[int]]) -> Optional[int]:
    """Sum up the known values, None if no value is known.

    >>> _sum_or_none([1, None, 2])
    3
    >>> _sum_or_none([None, None]) is None
    True
    """
    known = [value for value in values if value is not None]
    return sum(known) if known else None


def _generic_parameters(match: re.Match[str]) -> str:
    arity = int(match.group(1))
    if arity == 1:
        return "<T>"
    return "<" + ", ".join(f"T{index}" for index in range(1, arity + 1)) + ">"


class ContainerBase(CoverageBase):
    """Base class for the aggregates of coverage containers.

    Subclasses provide the contained files with ``_code_files()``.
    """

    __slots__ = ()

    def _code_files(self) -> Iterator[CodeFile]:
        raise NotImplementedError("Function '_code_files' not implemented.")

    @property
    def coverable_lines(self) -> int:
        """Number of lines with executable code."""
        return sum(codefile.coverable_lines for codefile in self._code_files())

    @property
    def covered_lines(self) -> int:
        """Number of lines which were visited at least partially."""
        return sum(codefile.covered_lines for codefile in self._code_files())

    @property
    def uncovered_lines(self) -> int:
        """Number of coverable lines which were not visited."""
        return self.coverable_lines - self.covered_lines

    @property
    def total_lines(self) -> Optional[int]:
        """Number of physical lines, None if no file was analyzed."""
        return _sum_or_none(codefile.total_lines for codefile in self._code_files())

    @property
    def covered_branches(self) -> Optional[int]:
        """Number of visited branches, None if no file tracks branches."""
        return _sum_or_none(
            codefile.covered_branches for codefile in self._code_files()
        )

    @property
    def total_branches(self) -> Optional[int]:
        """Number of branches, None if no file tracks branches."""
        return _sum_or_none(codefile.total_branches for codefile in self._code_files())

    @property
    def covered_code_elements(self) -> int:
        """Number of code elements with at least one visited line."""
        return sum(codefile.covered_code_elements for codefile in self._code_files())

    @property
    def full_covered_code_elements(self) -> int:
        """Number of code elements where all coverable lines were visited."""
        return sum(
            codefile.full_covered_code_elements for codefile in self._code_files()
        )

    @property
    def total_code_elements(self) -> int:
        """Number of code elements."""
        return sum(codefile.total_code_elements for codefile in self._code_files())

    @property
    def coverage_quota(self) -> Optional[float]:
        """Line coverage in percent."""
        return CoverageStat(self.covered_lines, self.coverable_lines).percent

    @property
    def branch_coverage_quota(self) -> Optional[float]:
        """Branch coverage in percent, None if branches aren't tracked."""
        total_branches = self.total_branches
        if total_branches is None:
            return None
        return CoverageStat(self.covered_branches or 0, total_branches).percent

    @property
    def code_element_coverage_quota(self) -> Optional[float]:
        """Percentage of code elements with at least one visited line."""
        return CoverageStat(
            self.covered_code_elements, self.total_code_elements
        ).percent

    @property
    def full_code_element_coverage_quota(self) -> Optional[float]:
        """Percentage of code elements where all coverable lines were visited."""
        return CoverageStat(
            self.full_covered_code_elements, self.total_code_elements
        ).percent

    @property
    def method_metrics(self) -> list[MethodMetric]:
        """Get the method metrics of all files."""
        return [
            method_metric
            for codefile in self._code_files()
            for method_metric in codefile.method_metrics
        ]

    @property
    def stats(self) -> SummarizedStats:
        """Create a coverage statistic of all contained files."""
        stats = SummarizedStats.new_empty()
        for codefile in self._code_files():
            stats += codefile.stats
        return stats


class Class(ContainerBase):
    r"""Represent the coverage of one class, spread over one or more files.

    Args:
        name (str):
            The full name of the class.
        assembly (Assembly):
            The assembly the class belongs to.
    """

    __slots__ = ("name", "assembly", "_files")

    def __init__(self, name: str, assembly: Assembly) -> None:
        self.name = name
        self.assembly = assembly
        self._files = CoverageDict[str, CodeFile]()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Class):
            return NotImplemented
        return (self.name, self.assembly.name) == (other.name, other.assembly.name)

    def __hash__(self) -> int:
        return hash((self.name, self.assembly.name))

    def __repr__(self) -> str:
        return f"Class({self.name!r}, {self.assembly.name!r})"

    @property
    def location(self) -> str:
        return f"class {self.name!r} of assembly {self.assembly.name!r}"

    @property
    def display_name(self) -> str:
        """Get the name with generic parameters instead of the arity.

        >>> Class("Test.GenericClass`2", Assembly("Test")).display_name
        'Test.GenericClass<T1, T2>'
        >>> Class("Test.List`1", Assembly("Test")).display_name
        'Test.List<T>'
        """
        return GENERIC_ARITY_REGEX.sub(_generic_parameters, self.name)

    @property
    def files(self) -> list[CodeFile]:
        """Get the files in insertion order."""
        return list(self._files.values())

    def _code_files(self) -> Iterator[CodeFile]:
        return iter(self._files.values())

    def add_file(self, codefile: CodeFile) -> CodeFile:
        """Add a file, merge if a file with the same path exists.

        Returns the file which is stored for the path.
        """
        if codefile.path in self._files:
            self._files[codefile.path].merge(codefile)
        else:
            self._files[codefile.path] = codefile

        return self._files[codefile.path]

    def merge(self, other: Class) -> None:
        """
        Merge Class information.

        Do not use 'other' objects afterwards!
        """
        if self.name != other.name:
            self.raise_merge_error("Name must be equal.", other)

        LOGGER.debug(f"Merge {self.location}")
        self._files.merge(other._files)  # pylint: disable=protected-access


class Assembly(ContainerBase):
    r"""Represent the coverage of one assembly (module, package).

    Args:
        name (str):
            The name of the assembly.
    """

    __slots__ = ("name", "_classes")

    def __init__(self, name: str) -> None:
        self.name = name
        self._classes = CoverageDict[str, Class]()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Assembly):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Assembly({self.name!r})"

    @property
    def location(self) -> str:
        return f"assembly {self.name!r}"

    @property
    def short_name(self) -> str:
        r"""Get the name without directory and library suffix.

        >>> Assembly("C:\\temp\\Test.dll").short_name
        'Test'
        >>> Assembly("lib/Test.Core.exe").short_name
        'Test.Core'
        >>> Assembly("Test").short_name
        'Test'
        """
        short_name = os.path.basename(self.name.replace("\\", "/"))
        for suffix in ASSEMBLY_SUFFIXES:
            if short_name.lower().endswith(suffix):
                return short_name[: -len(suffix)]
        return short_name

    @property
    def classes(self) -> list[Class]:
        """Get the classes in insertion order."""
        return list(self._classes.values())

    def _code_files(self) -> Iterator[CodeFile]:
        for cls in self._classes.values():
            yield from cls._code_files()  # pylint: disable=protected-access

    def add_class(self, cls: Class) -> Class:
        """Add a class, merge if a class with the same name exists.

        Returns the class which is stored for the name.
        """
        if cls.name in self._classes:
            self._classes[cls.name].merge(cls)
        else:
            cls.assembly = self
            self._classes[cls.name] = cls

        return self._classes[cls.name]

    def merge(self, other: Assembly) -> None:
        """
        Merge Assembly information.

        Do not use 'other' objects afterwards!
        """
        if self.name != other.name:
            self.raise_merge_error("Name must be equal.", other)

        LOGGER.debug(f"Merge {self.location}")
        for cls in other.classes:
            self.add_class(cls)
        other._classes.clear()  # pylint: disable=protected-access


class ParserResult:
    r"""The result of reading one or more coverage reports.

    Args:
        assemblies (list of Assembly):
            The assemblies, they are kept sorted by name.
        supports_branch_coverage (bool):
            True if the report format tracks branches.
        parser_name (str):
            The name of the format adapter which created the result.
        source_directories (list of str, optional):
            Directories which are searched for the source files.
    """

    __slots__ = (
        "_assemblies",
        "supports_branch_coverage",
        "parser_name",
        "source_directories",
    )

    def __init__(
        self,
        assemblies: Iterable[Assembly],
        supports_branch_coverage: bool,
        parser_name: str,
        source_directories: Iterable[str] = (),
    ) -> None:
        self._assemblies = CoverageDict[str, Assembly]()
        for assembly in assemblies:
            self.__add_assembly(assembly)
        self.supports_branch_coverage = supports_branch_coverage
        self.parser_name = parser_name
        self.source_directories = list(dict.fromkeys(source_directories))

    def __repr__(self) -> str:
        return f"ParserResult({self.parser_name!r}, {len(self._assemblies)} assemblies)"

    def __add_assembly(self, assembly: Assembly) -> None:
        if assembly.name in self._assemblies:
            self._assemblies[assembly.name].merge(assembly)
        else:
            self._assemblies[assembly.name] = assembly

    @property
    def assemblies(self) -> list[Assembly]:
        """Get the assemblies sorted by name."""
        return sorted(self._assemblies.values(), key=lambda assembly: assembly.name)

    @property
    def files(self) -> Iterator[CodeFile]:
        """Iterate over the files of all classes."""
        for assembly in self.assemblies:
            yield from assembly._code_files()  # pylint: disable=protected-access

    @property
    def stats(self) -> SummarizedStats:
        """Create a coverage statistic of all assemblies."""
        stats = SummarizedStats.new_empty()
        for assembly in self._assemblies.values():
            stats += assembly.stats
        return stats

    def merge(self, other: ParserResult) -> None:
        """
        Merge the result of another parser run.

        Do not use 'other' objects afterwards!

        Examples:
        >>> left = ParserResult([Assembly("B")], False, "CoberturaParser")
        >>> left.merge(ParserResult([Assembly("A")], True, "CoberturaParser, OpenCoverParser"))
        >>> [assembly.name for assembly in left.assemblies]
        ['A', 'B']
        >>> left.supports_branch_coverage
        True
        >>> left.parser_name
        'CoberturaParser, OpenCoverParser'
        """
        LOGGER.debug(f"Merge parser result of {other.parser_name}")
        for assembly in other._assemblies.values():
            self.__add_assembly(assembly)
        other._assemblies.clear()

        self.supports_branch_coverage = (
            self.supports_branch_coverage or other.supports_branch_coverage
        )
        parser_names = [
            name
            for parser_name in (self.parser_name, other.parser_name)
            for name in parser_name.split(", ")
            if name
        ]
        self.parser_name = ", ".join(dict.fromkeys(parser_names))
        self.source_directories = list(
            dict.fromkeys([*self.source_directories, *other.source_directories])
        )
