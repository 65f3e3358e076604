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
Merge per line visit counts.

All of these merging functions take the visit counts of a file
(or of one tracked test method within a file) and combine them.
In a mathematical sense they behave like an addition operator:

* commutative: ``merge(a, b)`` must match ``merge(b, a)``.
* associative: ``merge(a, merge(b, c))`` must match ``merge(merge(a, b), c)``.
* identity element: an array consisting only of ``-1`` entries
  does not change the other side.

Arrays of different length are padded with the not coverable sentinel,
they are never truncated.
"""

from itertools import zip_longest
from typing import Sequence

NOT_COVERABLE_VISITS = -1


def merge_visit_count(left: int, right: int) -> int:
    """Merge the visit counts of one line.

    Counts of two coverable lines are added:
    >>> merge_visit_count(2, 3)
    5

    A not coverable line defers to the other side:
    >>> merge_visit_count(-1, 0)
    0
    >>> merge_visit_count(4, -1)
    4
    >>> merge_visit_count(-1, -1)
    -1
    """
    if left >= 0 and right >= 0:
        return left + right
    return max(left, right)


def merge_visit_counts(left: Sequence[int], right: Sequence[int]) -> list[int]:
    """Merge two visit count arrays element-wise.

    >>> merge_visit_counts([-1, 0, 1], [-1, 1, 1, 0])
    [-1, 1, 2, 0]
    """
    return [
        merge_visit_count(a, b)
        for a, b in zip_longest(left, right, fillvalue=NOT_COVERABLE_VISITS)
    ]
