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

import logging
import re
from typing import Iterable

from .utils import force_unix_separator

LOGGER = logging.getLogger("covreport")


class Filter:
    """Base class for a name filter, names are matched case-insensitively."""

    def __init__(self, pattern: str) -> None:
        self.pattern = re.compile(pattern, re.IGNORECASE)

    def match(self, name: str) -> bool:
        """Return True if the given name (paths always with /) matches the regular expression."""
        os_independent_name = force_unix_separator(name)
        if self.pattern.fullmatch(os_independent_name):
            LOGGER.debug(f"  Filter {self} matched for {os_independent_name}.")
            return True
        return False

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern})"


class WildcardFilter(Filter):
    """Class for a filter with ``*`` as the only wildcard.

    >>> WildcardFilter("Test.*").match("test.Class")
    True
    >>> WildcardFilter("Test.*").match("Other.Test.Class")
    False
    >>> WildcardFilter("*/src/*").match("C:\\\\project\\\\src\\\\Class.cs")
    True
    """

    def __init__(self, wildcard: str) -> None:
        self.wildcard = wildcard
        pattern = ".*".join(
            re.escape(part) for part in force_unix_separator(wildcard).split("*")
        )
        super().__init__(pattern)

    def __str__(self) -> str:
        return f"WildcardFilter({self.wildcard})"


class AlwaysMatchFilter(Filter):
    """Class for a filter which matches for all names."""

    def __init__(self) -> None:
        super().__init__("")

    def match(self, name: str) -> bool:
        """Return always True."""
        return True


class ElementFilter:
    r"""Filter for assemblies, classes or files.

    Every filter string starts with ``+`` (include) or ``-`` (exclude),
    followed by a pattern where ``*`` matches any text.
    Without an include filter all elements are included.

    >>> element_filter = ElementFilter(["+Test.*", "-Test.Internal*"])
    >>> element_filter.is_element_included("Test.Service")
    True
    >>> element_filter.is_element_included("Test.InternalService")
    False
    >>> element_filter.is_element_included("Other.Service")
    False
    >>> ElementFilter([]).is_element_included("Other.Service")
    True
    """

    def __init__(self, filters: Iterable[str]) -> None:
        self.include_filters = list[Filter]()
        self.exclude_filters = list[Filter]()
        for element_filter in filters:
            if element_filter.startswith("+"):
                self.include_filters.append(WildcardFilter(element_filter[1:]))
            elif element_filter.startswith("-"):
                self.exclude_filters.append(WildcardFilter(element_filter[1:]))
            else:
                raise ValueError(
                    f"Filter {element_filter!r} must start with '+' or '-'."
                )

        if not self.include_filters:
            self.include_filters.append(AlwaysMatchFilter())

    @property
    def has_custom_filters(self) -> bool:
        """Return True if any filter other than the default one is set."""
        return bool(self.exclude_filters) or not isinstance(
            self.include_filters[0], AlwaysMatchFilter
        )

    def is_element_included(self, name: str) -> bool:
        """Return True if the name matches an include and no exclude filter."""
        return not is_element_excluded(name, self.include_filters, self.exclude_filters)


def is_element_excluded(
    name: str,
    include_filters: list[Filter],
    exclude_filters: list[Filter],
) -> bool:
    """Apply inclusion/exclusion filters to a name.

    name (str): the name of the assembly, class or file
    include_filters (list of Filter): ANY of these filters must match
    exclude_filters (list of Filter): NONE of these filters must match

    returns:
        True when name is not matching a include filter or matches an exclude filter.
    """

    LOGGER.debug(f"Check if {name} is included...")
    if not any(f.match(name) for f in include_filters):
        LOGGER.debug("  No filter matched.")
        return True

    if not exclude_filters:
        return False

    LOGGER.debug("Check for exclusion...")
    if any(f.match(name) for f in exclude_filters):
        return True

    LOGGER.debug("  No filter matched.")
    return False
