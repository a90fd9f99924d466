"""Opening YAML content in the user's editor."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from collections.abc import Iterable
from pathlib import Path

from limatools.editorcmd import detect

log = logging.getLogger(__name__)

_RULE = "# -----------\n"


def file_warning(filename: str | os.PathLike) -> str:
    """Return a commented warning quoting the settings held in *filename*.

    Returns an empty string when the file cannot be read or is empty.
    """
    try:
        data = Path(filename).read_text()
    except OSError:
        return ""
    if not data:
        return ""
    body = "".join(
        f"# {line}\n" if line else "#\n" for line in data.removesuffix("\n").split("\n")
    )
    return (
        f"# WARNING: {os.fspath(filename)} includes the following settings,\n"
        "# which are applied before applying this YAML:\n"
        + _RULE
        + body
        + _RULE
        + "\n"
    )


def generate_editor_warning_header(paths: Iterable[str | os.PathLike] | None) -> str:
    """Build the warning header for the given config files (default, override).

    *paths* is None when the config directory could not be determined.
    """
    if paths is None:
        return "# WARNING: failed to load the config dir\n\n"
    return "".join(file_warning(path) for path in paths)


def open_editor(content: bytes, header: str) -> bytes | None:
    """Edit *content* below *header* in an editor and return the edited content.

    Returns None when the file was saved empty or with whitespace only.
    """
    editor = detect()
    if not editor:
        raise RuntimeError("could not detect a text editor binary, try setting $EDITOR")
    header_bytes = header.encode()
    fd, tmp_path = tempfile.mkstemp(prefix="lima-editor-")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(header_bytes + content)
        os.chmod(tmp_path, 0o600)
        log.debug("opening editor %r for a file %r", editor, tmp_path)
        try:
            subprocess.run([editor, tmp_path], check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise RuntimeError(
                f"could not execute editor {editor!r} for a file {tmp_path!r}: {exc}"
            ) from exc
        modified = Path(tmp_path).read_bytes()
    finally:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
    modified = modified.removeprefix(header_bytes)
    if not modified.strip():
        return None
    return modified