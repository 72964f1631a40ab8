"""Parameter expansion and quote removal for single words."""

from __future__ import annotations

from collections.abc import Mapping

_QUOTES = ("'", '"')


def is_valid_var_char(c: str, first: bool) -> bool:
    """True if ``c`` may appear in a variable name (at its start when ``first``)."""
    if len(c) != 1 or not c.isascii():
        return False
    if first:
        return c.isalpha() or c == "_"
    return c.isalnum() or c == "_"


def _braced_name(text: str) -> tuple[str | None, int]:
    end = text.find("}", 2)
    if end == -1:
        return None, 0
    return text[2:end], end + 1


def extract_var_name(text: str) -> tuple[str | None, int]:
    """Read the variable reference at the start of ``text``.

    Returns the name and the number of characters the reference takes,
    or ``(None, 0)`` when ``text`` does not start with a valid reference.
    """
    if not text.startswith("$"):
        return None, 0
    second = text[1:2]
    if second == "?":
        return "?", 2
    if second == "{":
        return _braced_name(text)
    if not is_valid_var_char(second, True):
        return None, 0
    end = 2
    while end < len(text) and is_valid_var_char(text[end], False):
        end += 1
    return text[1:end], end


def expand_variable(name: str | None, env: Mapping[str, str], last_status: int) -> str:
    """Value of the variable ``name``; ``?`` is the last exit status."""
    if name is None:
        return ""
    if name == "?":
        return str(last_status)
    return env.get(name, "")


def _double_quote_flags(text: str) -> list[bool]:
    """For each position, whether it lies inside double quotes."""
    flags = []
    in_single = in_double = False
    for c in text:
        flags.append(in_double)
        if c == "'" and not in_single and not in_double:
            in_single = True
        elif c == "'" and in_single:
            in_single = False
        elif c == '"' and not in_single and not in_double:
            in_double = True
        elif c == '"' and in_double:
            in_double = False
    return flags


def expand_string(text: str, env: Mapping[str, str], last_status: int) -> str:
    """Replace variable references in ``text``, leaving quotes in place.

    Nothing inside single quotes is expanded. A ``$`` directly before a
    quote outside double quotes is dropped; any other ``$`` that does not
    start a reference is kept.
    """
    in_double = _double_quote_flags(text)
    out: list[str] = []
    in_single = False
    i = 0
    while i < len(text):
        c = text[i]
        if c == "'" and not in_double[i]:
            in_single = not in_single
        if c != "$" or in_single or i + 1 >= len(text):
            out.append(c)
            i += 1
            continue
        name, length = extract_var_name(text[i:])
        if name is None:
            if not in_double[i] and text[i + 1] in _QUOTES:
                i += 1
                continue
            out.append("$")
            i += 1
            continue
        out.append(expand_variable(name, env, last_status))
        i += length
    return "".join(out)


def remove_quotes(text: str) -> str:
    """Drop quote characters that open or close a quoted section."""
    out: list[str] = []
    quote: str | None = None
    for c in text:
        if quote is not None:
            if c == quote:
                quote = None
            else:
                out.append(c)
        elif c in _QUOTES:
            quote = c
        else:
            out.append(c)
    return "".join(out)


def has_quotes(text: str | None) -> bool:
    """True if ``text`` holds a single or double quote."""
    return bool(text) and any(c in _QUOTES for c in text)


def needs_expansion(text: str | None) -> bool:
    """True if ``text`` has a ``$`` outside single quotes."""
    if not text:
        return False
    in_single = False
    for c in text:
        if c == "'":
            in_single = not in_single
        elif c == "$" and not in_single:
            return True
    return False