"""Splitting a command line into words and operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

_SPACE = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset("0123456789")
_OPERATOR_CHARS = frozenset("|<>")


class TokenType(Enum):
    WORD = auto()
    PIPE = auto()
    LESS = auto()
    GREAT = auto()
    DGREAT = auto()
    DLESS = auto()
    SEMICOLON = auto()
    EOF = auto()

    @property
    def is_redirect(self) -> bool:
        return self in _REDIRECTS


_REDIRECTS = frozenset(
    {TokenType.LESS, TokenType.GREAT, TokenType.DGREAT, TokenType.DLESS}
)


class QuoteState(Enum):
    NONE = auto()
    SINGLE = auto()
    DOUBLE = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str


def quote_error_message(quote: QuoteState) -> str:
    """Return the message for a line that ends inside ``quote``."""
    if quote is QuoteState.SINGLE:
        return "minishell: unexpected EOF while looking for matching `''"
    if quote is QuoteState.DOUBLE:
        return 'minishell: unexpected EOF while looking for matching `"\''
    return ""


class UnclosedQuoteError(ValueError):
    """The input ended inside a quoted section."""

    def __init__(self, quote: QuoteState) -> None:
        self.quote = quote
        super().__init__(quote_error_message(quote))


def is_operator_char(c: str) -> bool:
    return c in _OPERATOR_CHARS


def _digit_run(text: str) -> int:
    end = 0
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    return end


def _is_fd_redir(text: str) -> bool:
    end = _digit_run(text)
    return end > 0 and text[end : end + 1] in ("<", ">")


_DOUBLE_OPERATORS = (
    ("<<", TokenType.DLESS),
    (">>", TokenType.DGREAT),
    (">|", TokenType.GREAT),
)
_SINGLE_OPERATORS = {"|": TokenType.PIPE, "<": TokenType.LESS, ">": TokenType.GREAT}


def operator_type(text: str) -> tuple[TokenType, int]:
    """Classify the operator at the start of ``text`` and return it with its length.

    A leading file-descriptor number (as in ``2>``) is part of the operator.
    Returns ``(TokenType.EOF, 0)`` when no operator starts there.
    """
    start = _digit_run(text) if _is_fd_redir(text) else 0
    rest = text[start:]
    for op, kind in _DOUBLE_OPERATORS:
        if rest.startswith(op):
            return kind, start + len(op)
    kind = _SINGLE_OPERATORS.get(rest[:1])
    if kind is not None:
        return kind, start + 1
    return TokenType.EOF, 0


def detect_operator_length(text: str) -> int:
    """Length of a plain operator (``<<``, ``>>``, ``|``, ``<``, ``>``) at the start of ``text``."""
    if text[:2] in ("<<", ">>"):
        return 2
    if text and is_operator_char(text[0]):
        return 1
    return 0


def _toggle_quote(quote: QuoteState, c: str) -> QuoteState:
    if quote is QuoteState.NONE:
        return QuoteState.SINGLE if c == "'" else QuoteState.DOUBLE
    if (quote is QuoteState.SINGLE and c == "'") or (
        quote is QuoteState.DOUBLE and c == '"'
    ):
        return QuoteState.NONE
    return quote


def _extract_word(line: str, pos: int, quote: QuoteState) -> tuple[str, int, QuoteState]:
    start = pos
    while pos < len(line):
        c = line[pos]
        if quote is QuoteState.NONE and (c in _SPACE or is_operator_char(c)):
            break
        if c in ("'", '"'):
            quote = _toggle_quote(quote, c)
        pos += 1
    return line[start:pos], pos, quote


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens; quotes stay inside the words.

    Raises UnclosedQuoteError when a quote is left open.
    """
    tokens: list[Token] = []
    quote = QuoteState.NONE
    pos = 0
    while pos < len(line):
        while pos < len(line) and line[pos] in _SPACE:
            pos += 1
        if pos >= len(line):
            break
        rest = line[pos:]
        if quote is QuoteState.NONE and (is_operator_char(rest[0]) or _is_fd_redir(rest)):
            kind, length = operator_type(rest)
            tokens.append(Token(kind, rest[:length]))
            pos += length
        else:
            word, pos, quote = _extract_word(line, pos, quote)
            if word:
                tokens.append(Token(TokenType.WORD, word))
    if quote is not QuoteState.NONE:
        raise UnclosedQuoteError(quote)
    return tokens