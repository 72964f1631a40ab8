"""Here-documents and opening the files that redirections name."""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterable, Iterator, Mapping
from typing import IO

from minishell.expansion import expand_string, remove_quotes
from minishell.parser import Command, Redirect, RedirType


class RedirectionError(OSError):
    """A redirection target could not be opened."""

    def __init__(self, filename: str, error: OSError) -> None:
        code = error.errno if error.errno is not None else 0
        text = os.strerror(code) if error.errno is not None else str(error)
        super().__init__(code, text, filename)
        self.status = 1

    def __str__(self) -> str:
        return f"{self.filename}: {self.strerror}"


class HeredocInterrupted(Exception):
    """Reading a here-document was cut short by an interrupt."""

    status = 130


def should_expand_heredoc(delimiter: str) -> bool:
    """Variables in the body are expanded only when the delimiter is unquoted."""
    return not any(c in ("'", '"') for c in delimiter)


def has_heredoc(redirects: Iterable[Redirect]) -> bool:
    return any(r.type is RedirType.HEREDOC for r in redirects)


def _strip_newline(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def read_heredoc(
    delimiter: str,
    lines: Iterable[str],
    env: Mapping[str, str],
    last_status: int,
) -> str:
    """Collect lines up to the delimiter line (or the end of input) as the body.

    Raises HeredocInterrupted if reading is interrupted.
    """
    terminator = remove_quotes(delimiter)
    expand = should_expand_heredoc(delimiter)
    body: list[str] = []
    try:
        for raw in lines:
            line = _strip_newline(raw)
            if line == terminator:
                break
            if expand:
                line = expand_string(line, env, last_status)
            body.append(line + "\n")
    except KeyboardInterrupt as exc:
        raise HeredocInterrupted() from exc
    return "".join(body)


def process_all_heredocs(
    commands: Iterable[Command],
    lines: Iterable[str],
    env: Mapping[str, str],
    last_status: int,
) -> None:
    """Read every here-document of the pipeline, in order, from one line source."""
    source = iter(lines)
    for cmd in commands:
        for redir in cmd.redirects:
            if redir.type is RedirType.HEREDOC:
                redir.heredoc = read_heredoc(redir.file, source, env, last_status)


def _open_target(redir: Redirect) -> IO[bytes] | None:
    try:
        if redir.type is RedirType.INPUT:
            return os.fdopen(os.open(redir.file, os.O_RDONLY), "rb")
        if redir.type in (RedirType.OUTPUT, RedirType.APPEND):
            flags = os.O_WRONLY | os.O_CREAT
            if redir.type is RedirType.APPEND:
                flags |= os.O_APPEND
                mode = "ab"
            else:
                flags |= os.O_TRUNC
                mode = "wb"
            return os.fdopen(os.open(redir.file, flags, 0o644), mode)
    except OSError as exc:
        raise RedirectionError(redir.file, exc) from exc
    if redir.heredoc is None:
        return None
    body = tempfile.TemporaryFile()
    body.write(redir.heredoc.encode())
    body.seek(0)
    return body


@contextlib.contextmanager
def open_redirections(redirects: Iterable[Redirect]) -> Iterator[dict[int, IO[bytes]]]:
    """Open every redirection in order and yield the files by descriptor number.

    A later redirection of the same descriptor replaces an earlier one. All
    files are closed on exit. Raises RedirectionError when a file cannot be
    opened; the files opened before it are closed.
    """
    opened: list[IO[bytes]] = []
    table: dict[int, IO[bytes]] = {}
    try:
        for redir in redirects:
            handle = _open_target(redir)
            if handle is None:
                continue
            opened.append(handle)
            table[redir.fd] = handle
        yield table
    finally:
        for handle in opened:
            handle.close()