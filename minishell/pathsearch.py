"""Locating commands on disk and explaining why a lookup failed."""

from __future__ import annotations

import errno
import os
import stat
from collections.abc import Mapping

from minishell.errors import (
    print_errno_error,
    report_cmdnf,
    report_isdir,
    report_not_found,
)


def is_directory(path: str) -> bool:
    """True if ``path`` itself (not a link target) is a directory."""
    try:
        st = os.lstat(path)
    except OSError:
        return False
    return stat.S_ISDIR(st.st_mode)


def _stat_is_dir(path: str) -> bool:
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except OSError:
        return False


def _executable_file(path: str) -> bool:
    if not os.access(path, os.F_OK):
        return False
    if _stat_is_dir(path):
        return False
    return os.access(path, os.X_OK)


def _path_dirs(path_env: str) -> list[str]:
    return [part for part in path_env.split(":") if part]


def resolve_path(cmd: str | None, env: Mapping[str, str]) -> str | None:
    """Return the executable that ``cmd`` names, or None if there is none.

    A name with a slash is checked as given; otherwise each directory of
    ``PATH`` is searched in order. An empty or unset ``PATH`` finds nothing.
    """
    if not cmd:
        return None
    if "/" in cmd:
        return cmd if _executable_file(cmd) else None
    path_env = env.get("PATH")
    if not path_env:
        return None
    for directory in _path_dirs(path_env):
        candidate = f"{directory}/{cmd}"
        if _executable_file(candidate):
            return candidate
    return None


def path_error_status(cmd: str, env: Mapping[str, str]) -> int:
    """Report why ``cmd`` cannot be run and return the exit status for it."""
    if "/" in cmd:
        if os.access(cmd, os.F_OK):
            if _stat_is_dir(cmd):
                return report_isdir(cmd)
            if not os.access(cmd, os.X_OK):
                print_errno_error(cmd, None, errno.EACCES)
                return 126
        return report_not_found(cmd)
    if not env.get("PATH"):
        return report_not_found(cmd)
    return report_cmdnf(cmd)