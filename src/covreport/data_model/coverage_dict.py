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

from __future__ import annotations
import logging
from typing import Any, Protocol, TypeVar

LOGGER = logging.getLogger("covreport")


class Mergeable(Protocol):
    """An item which can absorb another item with the same key."""

    def merge(self, other: Any) -> Any:
        """Merge other into self."""


_Key = TypeVar("_Key")
_T = TypeVar("_T", bound=Mergeable)


class CoverageDict(dict[_Key, _T]):
    """Base class for a coverage dictionary.

    >>> from covreport.data_model.coverage import Branch
    >>> left = CoverageDict({"a": Branch("a", 1), "b": Branch("b", 0)})
    >>> left.merge(CoverageDict({"b": Branch("b", 3), "c": Branch("c", 2)}))
    >>> sorted((k, v.visit_count) for k, v in left.items())
    [('a', 1), ('b', 3), ('c', 2)]
    """

    def merge(self, other: CoverageDict[_Key, _T]) -> None:
        """Helper function to merge items in a dictionary.

        Items of ``self`` keep their position, new items of ``other``
        are appended in the order of ``other``.
        """

        for key, item in other.items():
            if key in self:
                self[key].merge(item)
            else:
                self[key] = item

        # At this point, "self" contains all merged items.
        # The caller should access "other" objects therefore we clear it.
        other.clear()
