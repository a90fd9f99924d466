"""Selecting instances to list and choosing the output format."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

log = logging.getLogger(__name__)


def instance_matches(arg: str, instances: Iterable[str]) -> list[str]:
    """Return the entries of *instances* equal to *arg*."""
    return [instance for instance in instances if instance == arg]


def select_names(args: Sequence[str], all_names: Sequence[str]) -> list[str]:
    """Return the names selected by *args*, or all names when no args are given.

    Arguments matching nothing are skipped with a warning.
    """
    if not args:
        return list(all_names)
    selected: list[str] = []
    for arg in args:
        matches = instance_matches(arg, all_names)
        if matches:
            selected.extend(matches)
        else:
            log.warning("No instance matching %s found.", arg)
    return selected


def resolve_list_format(
    output_format: str,
    format_changed: bool,
    json_flag: bool,
    list_fields: bool,
    quiet: bool,
) -> str:
    """Return the effective output format, raising ValueError on conflicting options.

    *format_changed* tells whether --format was given explicitly.
    """
    if json_flag:
        output_format = "json"
    if json_flag and format_changed:
        raise ValueError("option --json conflicts with option --format")
    if list_fields and format_changed:
        raise ValueError("option --list-fields conflicts with option --format")
    if quiet and output_format != "table":
        raise ValueError("option --quiet can only be used with '--format table'")
    return output_format