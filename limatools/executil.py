"""Running commands whose output is UTF-16LE encoded."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence


def decode_utf16le(data: bytes) -> str:
    """Decode UTF-16LE bytes; invalid sequences become U+FFFD."""
    return data.decode("utf-16-le", errors="replace")


def run_utf16le_command(args: Sequence[str], timeout: float | None = None) -> str:
    """Run *args* and return its combined stdout and stderr decoded from UTF-16LE.

    A non-zero exit raises CalledProcessError carrying the decoded output;
    exceeding *timeout* seconds raises TimeoutExpired.
    """
    argv = list(args)
    if not argv:
        raise ValueError("no command given")
    proc = subprocess.run(
        argv,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        timeout=timeout,
        check=False,
    )
    output = decode_utf16le(proc.stdout or b"")
    if proc.returncode != 0:
        raise subprocess.CalledProcessError(proc.returncode, argv, output=output)
    return output