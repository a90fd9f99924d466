"""Parsing of snapshot listings."""

from __future__ import annotations


class UnknownHeaderError(ValueError):
    """Raised when a snapshot listing does not start with the expected header."""


def snapshot_tags(output: str) -> list[str]:
    """Return the snapshot tags from a listing with columns ID, TAG, VM SIZE, ...

    The first line is the header; its second column must be TAG.
    """
    tags = []
    for index, line in enumerate(output.split("\n")):
        fields = line.split()
        if index == 0:
            if len(fields) > 1 and fields[1] != "TAG":
                raise UnknownHeaderError(f"unknown header: {line}")
            continue
        if not line:
            continue
        if len(fields) < 2:
            raise ValueError(f"malformed snapshot line: {line!r}")
        tags.append(fields[1])
    return tags