import pytest

from minishell.expansion import (
    expand_string,
    expand_variable,
    extract_var_name,
    has_quotes,
    is_valid_var_char,
    needs_expansion,
    remove_quotes,
)

ENV = {"HOME": "/h", "USER": "u", "A": "v"}


@pytest.mark.parametrize(
    "c, first, expected",
    [
        ("a", True, True),
        ("_", True, True),
        ("1", True, False),
        ("1", False, True),
        ("-", False, False),
        ("", True, False),
        ("é", True, False),
    ],
)
def test_is_valid_var_char(c, first, expected):
    assert is_valid_var_char(c, first) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$abc def", ("abc", 4)),
        ("$?", ("?", 2)),
        ("$?x", ("?", 2)),
        ("${x}", ("x", 4)),
        ("${}", ("", 3)),
        ("${x", (None, 0)),
        ("x", (None, 0)),
        ("$9", (None, 0)),
        ("$", (None, 0)),
        ("$_a1-b", ("_a1", 4)),
    ],
)
def test_extract_var_name(text, expected):
    assert extract_var_name(text) == expected


def test_expand_variable():
    assert expand_variable(None, ENV, 0) == ""
    assert expand_variable("?", ENV, 7) == str(7)
    assert expand_variable("HOME", ENV, 0) == ENV["HOME"]
    assert expand_variable("MISSING", ENV, 0) == ""


def test_plain_variable():
    assert expand_string("$HOME", ENV, 0) == ENV["HOME"]


def test_last_status():
    assert expand_string("$?", ENV, 42) == str(42)


def test_variable_inside_text():
    assert expand_string("x$USER/y", ENV, 0) == "x" + ENV["USER"] + "/y"


def test_braced_variable():
    assert expand_string("${USER}x", ENV, 0) == ENV["USER"] + "x"


def test_unclosed_brace_is_literal():
    assert expand_string("${USER", ENV, 0) == "${USER"


def test_unset_variable_vanishes():
    assert expand_string("a$MISSING", ENV, 0) == "a"


@pytest.mark.parametrize("text", ["$", "a$", "$1x", "$-", "'$HOME'", "plain"])
def test_text_left_alone(text):
    assert expand_string(text, ENV, 0) == text


def test_double_quotes_expand():
    assert expand_string('"$HOME"', ENV, 0) == '"' + ENV["HOME"] + '"'


def test_mixed_quotes():
    text = "'$A'\"$A\""
    assert expand_string(text, ENV, 0) == "'$A'\"" + ENV["A"] + '"'


def test_single_quote_inside_double_quotes_does_not_block():
    assert expand_string("\"it's $A\"", ENV, 0) == "\"it's " + ENV["A"] + '"'


def test_dollar_before_quote_is_dropped_outside_double_quotes():
    assert expand_string("$'x'", ENV, 0) == "'x'"
    assert expand_string('$"x"', ENV, 0) == '"x"'


def test_dollar_before_quote_kept_inside_double_quotes():
    assert expand_string('"$"', ENV, 0) == '"$"'


def test_expansion_without_dollar_is_identity():
    text = "echo 'a' \"b\" c"
    assert expand_string(text, ENV, 0) == text


@pytest.mark.parametrize(
    "text, expected",
    [
        ("'a b'", "a b"),
        ('"x"y', "xy"),
        ("\"a'b\"", "a'b"),
        ("'abc", "abc"),
        ("", ""),
    ],
)
def test_remove_quotes(text, expected):
    assert remove_quotes(text) == expected


def test_remove_quotes_without_quotes_is_identity():
    assert remove_quotes("no-quotes here") == "no-quotes here"


def test_remove_quotes_never_grows():
    for text in ["'a'\"b\"", "\"'\"", "''", "x'y'z"]:
        assert len(remove_quotes(text)) <= len(text)


def test_has_quotes():
    assert has_quotes("a'b") is True
    assert has_quotes('a"b') is True
    assert has_quotes("ab") is False
    assert has_quotes(None) is False


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$x", True),
        ('"$x"', True),
        ("'$x'", False),
        ("abc", False),
        ("'a'$x", True),
        (None, False),
    ],
)
def test_needs_expansion(text, expected):
    assert needs_expansion(text) is expected