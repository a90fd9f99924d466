"""Detection of the user's text editor."""

import os
import shutil


def detect() -> str:
    """Return the path of a text editor, or an empty string if none is found.

    $VISUAL and $EDITOR are tried first, then a few common editors.
    """
    candidates = [
        os.environ.get("VISUAL", ""),
        os.environ.get("EDITOR", ""),
        "editor",
        "vim",
        "vi",
        "emacs",
    ]
    for candidate in candidates:
        if not candidate:
            continue
        found = shutil.which(candidate)
        if found:
            return found
    return ""