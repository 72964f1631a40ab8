"""Turning a token list into a pipeline of simple commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from minishell.lexer import Token, TokenType


class RedirType(Enum):
    INPUT = auto()
    OUTPUT = auto()
    APPEND = auto()
    HEREDOC = auto()


_TOKEN_TO_REDIR = {
    TokenType.LESS: RedirType.INPUT,
    TokenType.GREAT: RedirType.OUTPUT,
    TokenType.DGREAT: RedirType.APPEND,
    TokenType.DLESS: RedirType.HEREDOC,
}

_READING_KINDS = frozenset({RedirType.INPUT, RedirType.HEREDOC})


@dataclass
class Redirect:
    """One redirection: its kind, target word and the descriptor it replaces.

    ``heredoc`` holds the collected body of a here-document once it is read.
    """

    type: RedirType
    file: str
    fd: int
    heredoc: str | None = None


@dataclass
class Command:
    """A simple command: its words and redirections, in the order given."""

    argv: list[str] = field(default_factory=list)
    redirects: list[Redirect] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.argv and not self.redirects


class ParseError(ValueError):
    """A token appeared where the grammar does not allow it."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"syntax error near unexpected token `{token}'")


def _fd_from_operator(value: str, kind: RedirType) -> int:
    """Descriptor named by the digits leading an operator, or the kind's default."""
    digits = ""
    for c in value:
        if not c.isdigit() or not c.isascii():
            break
        digits += c
    if digits:
        return int(digits)
    return 0 if kind in _READING_KINDS else 1


def check_syntax(tokens: Sequence[Token]) -> None:
    """Check pipes and redirections for a missing or misplaced operand.

    Raises ParseError naming the offending token.
    """
    if tokens and tokens[0].type is TokenType.PIPE:
        raise ParseError("|")
    followers: list[Token | None] = [*tokens[1:], None]
    for tok, nxt in zip(tokens, followers):
        if tok.type is TokenType.PIPE:
            if nxt is None:
                raise ParseError("newline")
            if nxt.type is TokenType.PIPE:
                raise ParseError("|")
            if nxt.type is TokenType.SEMICOLON:
                raise ParseError(";")
        elif tok.type.is_redirect:
            if nxt is None:
                raise ParseError("newline")
            if nxt.type is not TokenType.WORD:
                raise ParseError(nxt.value)


def parse(tokens: Sequence[Token]) -> list[Command]:
    """Build the commands of a pipeline from ``tokens``.

    Returns an empty list when any command of the pipeline is empty.
    Raises ParseError when a redirection lacks its target word.
    """
    commands: list[Command] = []
    current = Command()
    pending = False
    stream = iter(tokens)
    for tok in stream:
        if tok.type is TokenType.PIPE:
            if current.is_empty:
                return []
            commands.append(current)
            current = Command()
            pending = False
            continue
        pending = True
        if tok.type.is_redirect:
            kind = _TOKEN_TO_REDIR[tok.type]
            target = next(stream, None)
            if target is None:
                raise ParseError("newline")
            if target.type is not TokenType.WORD:
                raise ParseError(target.value)
            current.redirects.append(
                Redirect(kind, target.value, _fd_from_operator(tok.value, kind))
            )
        elif tok.type is TokenType.WORD:
            current.argv.append(tok.value)
    if pending or not commands:
        if current.is_empty:
            return []
        commands.append(current)
    return commands