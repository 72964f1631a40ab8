"""The read–execute loop that drives the shell."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
import threading
from collections.abc import Callable, Iterator, Mapping
from typing import IO

from minishell.errors import print_error, syntax_error
from minishell.executor import run_commands
from minishell.fields import AmbiguousRedirectError, expand_commands
from minishell.lexer import UnclosedQuoteError, tokenize
from minishell.parser import ParseError, check_syntax, parse
from minishell.redirections import HeredocInterrupted, process_all_heredocs
from minishell.signals import SignalMode, setup_signals

PROMPT = "minishell$ "
HEREDOC_PROMPT = "> "
MAX_LINE = 5119
MAX_SHLVL = 999
_SPACE = frozenset(" \t\n\v\f\r")


def parse_int_prefix(text: str) -> int:
    """Read an optionally signed decimal number after leading whitespace.

    Reading stops at the first character that is not a digit; no digits gives 0.
    """
    pos = 0
    while pos < len(text) and text[pos] in _SPACE:
        pos += 1
    sign = 1
    if text[pos : pos + 1] in ("-", "+"):
        if text[pos] == "-":
            sign = -1
        pos += 1
    result = 0
    while pos < len(text) and "0" <= text[pos] <= "9":
        result = result * 10 + ord(text[pos]) - ord("0")
        pos += 1
    return sign * result


def next_shlvl(value: str | None) -> str:
    """The ``SHLVL`` a child shell gets when the parent's is ``value``."""
    level = parse_int_prefix(value) + 1 if value is not None else 1
    if level > MAX_SHLVL:
        level = 1
    return str(level)


def read_line(stream: IO[str]) -> str | None:
    """Read one line without its newline, at most MAX_LINE characters of it.

    Returns None at the end of input.
    """
    line = stream.readline(MAX_LINE)
    if not line:
        return None
    return line[:-1] if line.endswith("\n") else line


def _prompt(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


@contextlib.contextmanager
def _signal_setup(install: Callable[[], None]) -> Iterator[None]:
    """Install handlers for the duration of the block, then put the old ones back."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGQUIT)}
    install()
    try:
        yield
    finally:
        for sig, handler in saved.items():
            if handler is not None:
                signal.signal(sig, handler)


def _loop_signals(interactive: bool) -> None:
    if interactive:
        setup_signals(SignalMode.INTERACTIVE)
    else:
        signal.signal(signal.SIGINT, signal.SIG_DFL)


class Shell:
    """Shell state: the environment, the last exit status and the input source."""

    def __init__(self, environ: Mapping[str, str], interactive: bool = False) -> None:
        self.env: dict[str, str] = dict(environ)
        self.env["SHLVL"] = next_shlvl(self.env.get("SHLVL"))
        self.last_status = 0
        self.running = True
        self.interactive = interactive
        self.history: list[str] = []
        self._input: IO[str] = sys.stdin
        self._pending_interrupt = False

    def _heredoc_lines(self) -> Iterator[str]:
        while True:
            if self.interactive:
                _prompt(HEREDOC_PROMPT)
            line = read_line(self._input)
            if line is None:
                return
            yield line

    def _read_heredocs(self, commands: list) -> None:
        lines = self._heredoc_lines()
        if self.interactive:
            with _signal_setup(lambda: setup_signals(SignalMode.HEREDOC)):
                process_all_heredocs(commands, lines, self.env, self.last_status)
        else:
            process_all_heredocs(commands, lines, self.env, self.last_status)

    def execute_line(self, line: str) -> int:
        """Tokenize, parse, expand and run one line; return the new exit status."""
        try:
            tokens = tokenize(line)
        except UnclosedQuoteError as exc:
            sys.stderr.write(f"{exc}\n")
            sys.stderr.flush()
            self.last_status = 2
            return self.last_status
        if not tokens:
            self.last_status = 2
            return self.last_status
        try:
            check_syntax(tokens)
        except ParseError as exc:
            syntax_error(exc.token)
            self.last_status = 2
            return self.last_status
        try:
            commands = parse(tokens)
        except ParseError as exc:
            syntax_error(exc.token)
            return self.last_status
        if not commands:
            return self.last_status
        try:
            self._read_heredocs(commands)
        except HeredocInterrupted as exc:
            sys.stdout.write("^C\n")
            sys.stdout.flush()
            self.last_status = exc.status
            return self.last_status
        try:
            expand_commands(commands, self.env, self.last_status)
        except AmbiguousRedirectError as exc:
            print_error(exc.word, "ambiguous redirect")
            self.last_status = exc.status
            return self.last_status
        self.last_status = run_commands(commands, self.env, self.interactive)
        return self.last_status

    def _process_line(self, line: str) -> None:
        if self._pending_interrupt:
            self.last_status = 130
            self._pending_interrupt = False
        if self.interactive:
            self.history.append(line)
        self.execute_line(line)

    def _next_line(self) -> str | None:
        if not self.interactive:
            return read_line(self._input)
        while True:
            _prompt(PROMPT)
            try:
                return read_line(self._input)
            except KeyboardInterrupt:
                self._pending_interrupt = True

    def loop(self, stream: IO[str] | None = None) -> int:
        """Read and run lines from ``stream`` until it ends; return the last status."""
        self._input = stream if stream is not None else sys.stdin
        with _signal_setup(lambda: _loop_signals(self.interactive)):
            while self.running:
                line = self._next_line()
                if line is None:
                    if self.interactive:
                        sys.stderr.write("exit\n")
                        sys.stderr.flush()
                    self.running = False
                    break
                if line:
                    try:
                        self._process_line(line)
                    except KeyboardInterrupt:
                        if not self.interactive:
                            raise
                        self._pending_interrupt = True
        return self.last_status


def main(argv: list[str] | None = None) -> int:
    """Run the shell on standard input and return its final exit status."""
    shell = Shell(os.environ, sys.stdin.isatty())
    return shell.loop(sys.stdin)


if __name__ == "__main__":
    sys.exit(main())