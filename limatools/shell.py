"""Building the command line that opens a shell inside an instance."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence

log = logging.getLogger(__name__)

# Subcommands that, given to the shell alias, are probably meant for limactl.
_LIKELY_TYPOS = frozenset({"create", "start", "delete", "shell"})


def is_env(arg: str) -> bool:
    """Return whether *arg* looks like an environment assignment (NAME=value)."""
    return "=" in arg


def quote_env(arg: str) -> str:
    """Quote the value of the NAME=value assignment *arg* for the shell."""
    name, _, value = arg.partition("=")
    return f"{name}={shlex.quote(value)}"


def strip_double_dash(args: Sequence[str]) -> list[str]:
    """Drop a "--" given right after the instance name.

    Also warns when the command looks like a mistyped limactl subcommand.
    """
    result = list(args)
    if len(result) >= 2 and result[1] == "--":
        result = result[:1] + result[2:]
    if len(result) >= 2 and result[1] in _LIKELY_TYPOS:
        log.warning("Perhaps you meant `limactl %s`?", " ".join(result[1:]))
    return result


def build_change_dir_cmd(
    work_dir: str,
    has_mounts: bool,
    cwd: str | None,
    home: str | None,
) -> str:
    """Return the shell command that changes into the working directory.

    An explicit *work_dir* must be entered or the shell exits. Otherwise, when
    the host is mounted, the host's current directory is tried and then its
    home directory. *cwd* and *home* are None when they could not be determined.
    """
    change_dir_cmd = ""
    if work_dir:
        change_dir_cmd = f"cd {shlex.quote(work_dir)} || exit 1"
    elif has_mounts:
        if cwd is not None:
            change_dir_cmd = f"cd {shlex.quote(cwd)}"
        else:
            change_dir_cmd = "false"
            log.warning("failed to get the current directory")
        if home is not None:
            change_dir_cmd = f"{change_dir_cmd} || cd {shlex.quote(home)}"
        else:
            log.warning("failed to get the home directory")
    else:
        log.debug(
            "the host home does not seem mounted, so the guest shell will have a different cwd"
        )
    if not change_dir_cmd:
        change_dir_cmd = "false"
    log.debug("change_dir_cmd=%r", change_dir_cmd)
    return change_dir_cmd


def build_shell_script(change_dir_cmd: str, shell: str, command: Sequence[str]) -> str:
    """Return the script run by ssh in the guest.

    An empty *shell* means the user's login shell. Leading NAME=value words of
    *command* keep their assignment form, with only the value quoted.
    """
    shell_word = shlex.quote(shell) if shell else '"$SHELL"'
    script = f"{change_dir_cmd} ; exec {shell_word} --login"
    if command:
        quoted = []
        parsing_env = True
        for arg in command:
            if parsing_env and is_env(arg):
                quoted.append(quote_env(arg))
            else:
                parsing_env = False
                quoted.append(shlex.quote(arg))
        script += f" -c {shlex.quote(' '.join(quoted))}"
    return script