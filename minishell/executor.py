"""Running parsed commands and pipelines as child processes."""

from __future__ import annotations

import contextlib
import errno
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator, Mapping, Sequence
from typing import IO

from minishell.errors import print_errno_error, report_isdir, report_not_found
from minishell.parser import Command
from minishell.pathsearch import is_directory, path_error_status, resolve_path
from minishell.redirections import RedirectionError, open_redirections
from minishell.signals import (
    SignalMode,
    setup_signals,
    signal_status_message,
    status_from_returncode,
)

_WATCHED = (signal.SIGINT, signal.SIGQUIT)

_Stage = "subprocess.Popen[bytes] | int"


def _emit(stream: IO[str], text: str) -> None:
    if text:
        stream.write(text)
        stream.flush()


def _close_quietly(fd: int | None) -> None:
    if fd is None:
        return
    with contextlib.suppress(OSError):
        os.close(fd)


@contextlib.contextmanager
def _waiting_signals(interactive: bool) -> Iterator[None]:
    """Ignore interrupts while children run, then put the prompt's handling back."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    saved = [(sig, signal.getsignal(sig)) for sig in _WATCHED]
    setup_signals(SignalMode.EXECUTING)
    try:
        yield
    finally:
        if interactive:
            setup_signals(SignalMode.INTERACTIVE)
        else:
            for sig, handler in saved:
                if handler is not None:
                    signal.signal(sig, handler)


def _report_redirection(exc: RedirectionError) -> int:
    print_errno_error(exc.filename, None, exc)
    return exc.status


def _exec_no_search(name: str) -> str | int:
    """Program to run for a bare name when PATH is unset, or the failure status."""
    if not name:
        return report_not_found("")
    if is_directory(name):
        return report_isdir(name)
    if os.access(name, os.X_OK):
        return os.path.join(".", name)
    if os.access(name, os.F_OK):
        print_errno_error(name, None, errno.EACCES)
        return 126
    return report_not_found(name)


def _spawn(
    argv: Sequence[str],
    executable: str,
    env: Mapping[str, str],
    table: Mapping[int, IO[bytes]],
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> subprocess.Popen[bytes] | int:
    stdin = table.get(0, stdin_fd)
    stdout = table.get(1, stdout_fd)
    stderr = table.get(2)
    extra = {fd: handle.fileno() for fd, handle in table.items() if fd > 2}

    def child_setup() -> None:
        setup_signals(SignalMode.CHILD)
        for target, source in extra.items():
            os.dup2(source, target)

    try:
        return subprocess.Popen(
            list(argv),
            executable=executable,
            env=dict(env),
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            preexec_fn=child_setup,
            close_fds=not extra,
        )
    except OSError as exc:
        print_errno_error(argv[0], None, exc)
        return 127 if exc.errno == errno.ENOENT else 126


def execute_single(cmd: Command, env: Mapping[str, str], interactive: bool) -> int:
    """Run one command on its own and return its exit status."""
    if not cmd.argv:
        try:
            with open_redirections(cmd.redirects):
                pass
        except RedirectionError as exc:
            return _report_redirection(exc)
        return 0
    name = cmd.argv[0]
    path = resolve_path(name, env)
    if path is None and ("/" in name or env.get("PATH")):
        return path_error_status(name, env)
    try:
        with open_redirections(cmd.redirects) as table:
            target = path if path is not None else _exec_no_search(name)
            if isinstance(target, int):
                return target
            started = _spawn(cmd.argv, target, env, table)
    except RedirectionError as exc:
        return _report_redirection(exc)
    if isinstance(started, int):
        return started
    with _waiting_signals(interactive):
        returncode = started.wait()
    status = status_from_returncode(returncode)
    if returncode < 0:
        _emit(sys.stderr, signal_status_message(status))
    return status


def _stage_program(name: str, env: Mapping[str, str]) -> str | int:
    path = resolve_path(name, env)
    if path is not None:
        return path
    if "/" not in name:
        return _exec_no_search(name)
    return name


def _start_stage(
    cmd: Command,
    env: Mapping[str, str],
    stdin_fd: int | None,
    stdout_fd: int | None,
) -> subprocess.Popen[bytes] | int:
    try:
        with open_redirections(cmd.redirects) as table:
            if not cmd.argv:
                return 0
            target = _stage_program(cmd.argv[0], env)
            if isinstance(target, int):
                return target
            return _spawn(cmd.argv, target, env, table, stdin_fd, stdout_fd)
    except RedirectionError as exc:
        return _report_redirection(exc)


def _wait_stage(stage: subprocess.Popen[bytes] | int) -> int:
    if isinstance(stage, int):
        return stage
    return status_from_returncode(stage.wait())


def execute_pipeline(
    commands: Sequence[Command], env: Mapping[str, str], interactive: bool
) -> int:
    """Run the commands connected by pipes; the status is that of the last one."""
    stages: list[subprocess.Popen[bytes] | int] = []
    last_index = len(commands) - 1
    prev_read: int | None = None
    failed = False
    try:
        for position, cmd in enumerate(commands):
            read_end = write_end = None
            if position < last_index:
                try:
                    read_end, write_end = os.pipe()
                except OSError:
                    failed = True
                    break
            stdin_fd = prev_read
            prev_read = read_end
            try:
                stages.append(_start_stage(cmd, env, stdin_fd, write_end))
            finally:
                _close_quietly(stdin_fd)
                _close_quietly(write_end)
    finally:
        _close_quietly(prev_read)
    with _waiting_signals(interactive):
        statuses = [_wait_stage(stage) for stage in stages]
    if failed:
        return 1
    status = statuses[-1] if statuses else 0
    message = signal_status_message(status)
    _emit(sys.stdout if status == 130 else sys.stderr, message)
    return status


def run_commands(
    commands: Sequence[Command], env: Mapping[str, str], interactive: bool
) -> int:
    """Run a parsed line: one command directly, several as a pipeline."""
    if not commands:
        return 0
    if len(commands) == 1:
        return execute_single(commands[0], env, interactive)
    return execute_pipeline(commands, env, interactive)