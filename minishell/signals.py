"""Signal dispositions for the shell's states and exit statuses of killed children."""

from __future__ import annotations

import signal
import sys
from enum import Enum, auto
from types import FrameType

_MESSAGES = {
    128 + signal.SIGINT: "\n",
    128 + signal.SIGQUIT: "Quit (core dumped)\n",
}


class SignalMode(Enum):
    """What the shell is doing, which decides how it reacts to signals."""

    INTERACTIVE = auto()
    CHILD = auto()
    EXECUTING = auto()
    HEREDOC = auto()


def _interactive_handler(signum: int, frame: FrameType | None) -> None:
    sys.stderr.write("^C\n")
    sys.stderr.flush()
    raise KeyboardInterrupt


def setup_signals(mode: SignalMode) -> None:
    """Install the SIGINT and SIGQUIT dispositions for ``mode``.

    At the prompt and while reading a here-document an interrupt raises
    KeyboardInterrupt; while waiting for children both signals are ignored;
    a child gets the default dispositions back.
    """
    if mode is SignalMode.INTERACTIVE:
        signal.signal(signal.SIGINT, _interactive_handler)
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    elif mode is SignalMode.CHILD:
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        signal.signal(signal.SIGQUIT, signal.SIG_DFL)
    elif mode is SignalMode.EXECUTING:
        signal.signal(signal.SIGINT, signal.SIG_IGN)
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    elif mode is SignalMode.HEREDOC:
        signal.signal(signal.SIGINT, signal.default_int_handler)
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def status_from_returncode(returncode: int) -> int:
    """Shell exit status for a child's return code; a signal N gives 128 + N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def signal_status_message(status: int) -> str:
    """Text printed after a child dies of SIGINT or SIGQUIT, else the empty string."""
    return _MESSAGES.get(status, "")