"""Diagnostics that the shell writes to standard error."""

from __future__ import annotations

import os
import sys

ERROR_PREFIX = "minishell: "


def _emit(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def _errno_text(err: int | OSError) -> str:
    if isinstance(err, OSError):
        if err.errno is None:
            return err.strerror or str(err)
        return os.strerror(err.errno)
    return os.strerror(err)


def print_error(context: str | None, msg: str | None) -> None:
    """Write ``minishell: <context>: <msg>`` to standard error."""
    parts = [ERROR_PREFIX]
    if context is not None:
        parts += [context, ": "]
    if msg is not None:
        parts.append(msg)
    parts.append("\n")
    _emit("".join(parts))


def print_errno_error(
    context: str | None, target: str | None, err: int | OSError
) -> None:
    """Write a message naming ``context`` and ``target`` and the text of ``err``."""
    parts = [ERROR_PREFIX]
    if context is not None:
        parts += [context, ": "]
    if target is not None:
        parts += [target, ": "]
    parts += [_errno_text(err), "\n"]
    _emit("".join(parts))


def syntax_error(token: str | None) -> None:
    """Report an unexpected token."""
    _emit(f"{ERROR_PREFIX}syntax error near unexpected token `{token or ''}'\n")


def report_not_found(cmd: str) -> int:
    """Report a missing file and return the matching exit status."""
    _emit(f"{ERROR_PREFIX}{cmd}: No such file or directory\n")
    return 127


def report_isdir(cmd: str) -> int:
    """Report that ``cmd`` is a directory and return the matching exit status."""
    _emit(f"{ERROR_PREFIX}{cmd}: Is a directory\n")
    return 126


def report_cmdnf(cmd: str) -> int:
    """Report an unknown command and return the matching exit status."""
    _emit(f"{ERROR_PREFIX}{cmd}: command not found\n")
    return 127


def print_cmd_error(cmd: str | None) -> None:
    """Explain why ``cmd`` could not be run."""
    if not cmd:
        print_error(cmd, "command not found")
        return
    if "/" not in cmd:
        print_error(cmd, "command not found")
        return
    if os.path.isdir(cmd):
        print_error(cmd, "Is a directory")
    elif os.access(cmd, os.F_OK) and not os.access(cmd, os.X_OK):
        print_error(cmd, "Permission denied")
    else:
        print_error(cmd, "No such file or directory")