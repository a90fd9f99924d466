"""Helpers for managing Linux virtual machine instances: names, edit flags, shell scripts, cloud-init data and disks."""

__version__ = "0.1.0"

__all__ = [
    "bicopy",
    "cidata",
    "disk",
    "editflags",
    "editorcmd",
    "editutil",
    "executil",
    "guessarg",
    "identifiers",
    "listing",
    "shell",
    "snapshot",
]