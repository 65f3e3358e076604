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

"""Configuration of covreport, read from TOML files."""

from __future__ import annotations
import logging
import os
import sys
from typing import Any, Callable, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

LOGGER = logging.getLogger("covreport")

CONFIG_FILENAME = "covreport.toml"
PYPROJECT_FILENAME = "pyproject.toml"


def check_positive_int(value: Any) -> int:
    r"""
    Check that the value is an integer greater than zero and if so return it.

    >>> check_positive_int(4)
    4
    >>> check_positive_int("2")
    2
    >>> check_positive_int(0)
    Traceback (most recent call last):
      ...
    ValueError: 0 is not a positive integer.
    """
    try:
        x = int(value)
        if isinstance(value, bool) or x < 1:
            raise ValueError()
    except (TypeError, ValueError):
        raise ValueError(f"{value} is not a positive integer.") from None
    return x


def check_bool(value: Any) -> bool:
    r"""
    Check that the value is a boolean.
    """
    if not isinstance(value, bool):
        raise ValueError(f"{value!r} is not a boolean.")
    return value


def check_str(value: Any) -> str:
    r"""
    Check that the value is a non empty string.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"{value!r} is not a non-empty string.")
    return value


def check_str_list(value: Any) -> list[str]:
    r"""
    Check that the value is a string or a list of strings, return a list.

    >>> check_str_list("+Test*")
    ['+Test*']
    >>> check_str_list(["+Test*", "-Test.Internal"])
    ['+Test*', '-Test.Internal']
    """
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ValueError(f"{value!r} is not a list of strings.")
    return [check_str(item) for item in value]


class Options:
    """Wrapper for holding the configuration."""

    def __init__(self, **kwargs: Any) -> None:
        self.__dict__.update(kwargs)

    def get(self, name: str) -> Any:
        """Function to get an option by name."""
        return self.__dict__.get(name)

    @classmethod
    def with_defaults(cls, **kwargs: Any) -> Options:
        """Create the options where every unset known option has its default."""
        values = {option.name: option.default_value() for option in CONFIG_OPTIONS}
        for name, value in kwargs.items():
            if (option := OPTIONS_BY_NAME.get(name)) is not None:
                value = option.check(value)
            values[name] = value
        return cls(**values)


class ConfigOption:
    # pylint: disable=too-few-public-methods
    # pylint: disable=redefined-builtin
    r"""
    Represents a single setting of covreport.

    Arguments:
        name (str):
            Destination (options object field),
            must be valid Python identifier.

    Keyword Arguments:
        default (any, optional):
            Default value if the option is not found, defaults to None.
            Lists are copied for every options object.
        type (function):
            Check and convert the option value, may throw ValueError.
        help (str):
            Help message.
        config (str, optional):
            Configuration file key.
            If absent, the name with dashes instead of underscores is used.
    """

    def __init__(
        self,
        name: str,
        *,
        help: str,
        type: Callable[[Any], Any],
        default: Any = None,
        config: Optional[str] = None,
    ) -> None:
        if not help:
            raise AssertionError("help required")

        self.name = name
        self.help = help
        self.type = type
        self.default = default
        self.config = name.replace("_", "-") if config is None else config

    def __repr__(self) -> str:
        return f"ConfigOption({self.name!r}, config={self.config!r})"

    def default_value(self) -> Any:
        """Get a fresh default value."""
        return list(self.default) if isinstance(self.default, list) else self.default

    def check(self, value: Any) -> Any:
        """Check and convert a value of this option."""
        return self.type(value)


CONFIG_OPTIONS = [
    ConfigOption(
        "verbose",
        help="Print progress messages. Please include this output in bug reports.",
        type=check_bool,
        default=False,
    ),
    ConfigOption(
        "parallel",
        help="Number of threads used to build the files of an assembly.",
        type=check_positive_int,
        default=1,
    ),
    ConfigOption(
        "source_encoding",
        help="The encoding of the source files.",
        type=check_str,
        default="utf-8",
    ),
    ConfigOption(
        "source_directories",
        help=(
            "Directories which are searched for source files "
            "whose path doesn't exist as given in the report."
        ),
        type=check_str_list,
        default=[],
    ),
    ConfigOption(
        "assembly_filters",
        help=(
            "Assemblies to include (+Pattern) or exclude (-Pattern). "
            "Wildcards (*) are allowed."
        ),
        type=check_str_list,
        default=[],
    ),
    ConfigOption(
        "class_filters",
        help=(
            "Classes to include (+Pattern) or exclude (-Pattern). "
            "Wildcards (*) are allowed."
        ),
        type=check_str_list,
        default=[],
    ),
    ConfigOption(
        "file_filters",
        help=(
            "Files to include (+Pattern) or exclude (-Pattern). "
            "Wildcards (*) are allowed."
        ),
        type=check_str_list,
        default=[],
    ),
]

OPTIONS_BY_NAME = {option.name: option for option in CONFIG_OPTIONS}
OPTIONS_BY_CONFIG_KEY = {option.config: option for option in CONFIG_OPTIONS}


def find_config_name(root: str, filename: str) -> Optional[str]:
    """Find the configuration to use."""
    if root:
        filename = os.path.join(root, filename)

    if os.path.isfile(filename):
        return filename

    return None


def options_from_dict(data: dict[str, Any], filename: str) -> Options:
    """Check the keys and values of a configuration table."""
    values = dict[str, Any]()
    for key, value in data.items():
        if (option := OPTIONS_BY_CONFIG_KEY.get(key)) is None:
            raise ValueError(f"{filename}: Unknown config key {key!r}.")
        try:
            values[option.name] = option.check(value)
        except ValueError as e:
            raise ValueError(f"{filename}: Invalid value for {key!r}: {e}") from None

    return Options.with_defaults(**values)


def load_config(filename: Optional[str] = None, root: str = "") -> Options:
    """Load a config file if given or found by default names.

    Without any configuration file the defaults are used.
    """
    if filename is not None:
        with open(filename, "rb") as buf:
            data = tomllib.load(buf)
        if os.path.basename(filename) == PYPROJECT_FILENAME:
            data = data.get("tool", {}).get("covreport", {})
        return options_from_dict(data, filename)

    if filename := find_config_name(root, CONFIG_FILENAME):
        with open(filename, "rb") as buf:
            data = tomllib.load(buf)
        LOGGER.debug(f"Using configuration file {filename}.")
        return options_from_dict(data, filename)

    if filename := find_config_name(root, PYPROJECT_FILENAME):
        with open(filename, "rb") as buf:
            data = tomllib.load(buf)
        if (covreport_section := data.get("tool", {}).get("covreport")) is not None:
            LOGGER.debug(f"Using section tool.covreport of {filename}.")
            return options_from_dict(covreport_section, filename)

    return Options.with_defaults()
