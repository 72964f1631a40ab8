"""Word expansion for whole commands: expansion, field splitting and quote removal."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from minishell.expansion import expand_string, has_quotes, remove_quotes
from minishell.parser import Command, RedirType

_SPACE = frozenset(" \t\n\v\f\r")


class AmbiguousRedirectError(ValueError):
    """A redirection target expanded to zero words or to several."""

    def __init__(self, word: str) -> None:
        self.word = word
        self.status = 1
        super().__init__(f"{word}: ambiguous redirect")


def split_on_whitespace(text: str) -> list[str]:
    """Split ``text`` at whitespace that lies outside quotes; quotes are kept."""
    fields: list[str] = []
    current: list[str] = []
    in_field = in_single = in_double = False
    for c in text:
        if not in_single and not in_double and c in _SPACE:
            if in_field:
                fields.append("".join(current))
                current = []
                in_field = False
            continue
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        current.append(c)
        in_field = True
    if in_field:
        fields.append("".join(current))
    return fields


def split_quoted_token(text: str) -> list[str]:
    """Split an expanded word that held quotes, then strip the quotes of each field."""
    return [remove_quotes(field) for field in split_on_whitespace(text)]


def expand_and_split_token(
    token: str, env: Mapping[str, str], last_status: int
) -> list[str]:
    """Expand one word into the list of fields it stands for.

    A word without quotes that expands to nothing yields no fields at all.
    """
    expanded = expand_string(token, env, last_status)
    if has_quotes(token):
        return split_quoted_token(expanded)
    unquoted = remove_quotes(expanded)
    if not unquoted:
        return []
    return split_on_whitespace(unquoted)


def check_ambiguous_redirect(original: str, fields: list[str] | None) -> None:
    """Raise AmbiguousRedirectError unless ``fields`` holds exactly one word."""
    if not fields or len(fields) > 1:
        raise AmbiguousRedirectError(original)


def expand_command(cmd: Command, env: Mapping[str, str], last_status: int) -> None:
    """Expand the words and redirection targets of ``cmd`` in place.

    Here-document delimiters are left as written.
    Raises AmbiguousRedirectError when a target does not expand to one word.
    """
    cmd.argv = [
        field
        for word in cmd.argv
        for field in expand_and_split_token(word, env, last_status)
    ]
    for redir in cmd.redirects:
        if redir.type is RedirType.HEREDOC:
            continue
        fields = expand_and_split_token(redir.file, env, last_status)
        check_ambiguous_redirect(redir.file, fields)
        redir.file = fields[0]


def expand_commands(
    commands: Iterable[Command], env: Mapping[str, str], last_status: int
) -> None:
    """Expand every command of a pipeline in place."""
    for cmd in commands:
        expand_command(cmd, env, last_status)