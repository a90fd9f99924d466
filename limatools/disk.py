"""Helpers for managing data disks: sizes, formats and name matching."""

from __future__ import annotations

import re
from collections.abc import Iterable

SUPPORTED_FORMATS = ("qcow2", "raw")

_SIZE_PATTERN = re.compile(r"(\d+(?:\.\d+)*) ?([kKmMgGtTpP])?[iI]?[bB]?", re.ASCII)

_BINARY_MULTIPLIERS = {
    "k": 1 << 10,
    "m": 1 << 20,
    "g": 1 << 30,
    "t": 1 << 40,
    "p": 1 << 50,
}

_BINARY_ABBRS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")


def ram_in_bytes(size: str) -> int:
    """Parse a human-readable size such as "10GiB", "512M" or "1g" into bytes.

    Unit prefixes are binary (k = 1024). Raises ValueError for invalid input.
    """
    match = _SIZE_PATTERN.fullmatch(size)
    if match is None:
        raise ValueError(f"invalid size: {size!r}")
    number, prefix = match.groups()
    try:
        value = float(number)
    except ValueError:
        raise ValueError(f"invalid size: {size!r}") from None
    if prefix:
        value *= _BINARY_MULTIPLIERS[prefix.lower()]
    return int(value)


def bytes_size(size: float) -> str:
    """Format *size* bytes with binary units, e.g. "1.5GiB"."""
    value = float(size)
    index = 0
    while value >= 1024.0 and index < len(_BINARY_ABBRS) - 1:
        value /= 1024.0
        index += 1
    return f"{value:.4g}{_BINARY_ABBRS[index]}"


def validate_disk_format(disk_format: str) -> None:
    """Raise ValueError unless *disk_format* is "qcow2" or "raw"."""
    if disk_format not in SUPPORTED_FORMATS:
        raise ValueError(
            f'disk format {disk_format!r} not supported, use "qcow2" or "raw" instead'
        )


def disk_matches(disk_name: str, disks: Iterable[str]) -> list[str]:
    """Return the entries of *disks* equal to *disk_name*."""
    return [disk for disk in disks if disk == disk_name]


def force_delete_command(disk_name: str) -> str:
    """Return the command line that deletes *disk_name* regardless of references."""
    return f"limactl disk delete --force {disk_name}"


def check_resize(new_size: int, current_size: int) -> None:
    """Raise ValueError if resizing to *new_size* would shrink the disk."""
    if new_size < current_size:
        raise ValueError(
            f"specified size {bytes_size(new_size)!r} is less than the current disk size "
            f"{bytes_size(current_size)!r}. Disk shrinking is currently unavailable"
        )