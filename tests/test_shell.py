import io
import os
import sys

import pytest

from minishell.shell import (
    MAX_LINE,
    Shell,
    main,
    next_shlvl,
    parse_int_prefix,
    read_line,
)


def _env(**extra):
    env = {"PATH": os.environ.get("PATH", "/usr/bin:/bin")}
    env.update(extra)
    return env


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("  -42abc", -42), ("+7", 7), ("", 0), ("abc", 0), ("\t\n12 3", 12)],
)
def test_parse_int_prefix(text, expected):
    assert parse_int_prefix(text) == expected


def test_next_shlvl_increments():
    assert next_shlvl("3") == "4"


def test_next_shlvl_missing_starts_at_one():
    assert next_shlvl(None) == "1"


def test_next_shlvl_wraps_past_limit():
    assert next_shlvl("999") == "1"
    assert next_shlvl("998") == "999"


def test_next_shlvl_garbage_counts_as_zero():
    assert next_shlvl("abc") == "1"


def test_shell_init_updates_shlvl():
    shell = Shell({"SHLVL": "3", "FOO": "bar"}, False)
    assert shell.env["SHLVL"] == "4"
    assert shell.env["FOO"] == "bar"
    assert shell.last_status == 0


def test_shell_init_does_not_touch_source():
    source = {"SHLVL": "1"}
    Shell(source, False)
    assert source == {"SHLVL": "1"}


def test_read_line_splits_lines():
    stream = io.StringIO("a\nb")
    assert read_line(stream) == "a"
    assert read_line(stream) == "b"
    assert read_line(stream) is None


def test_read_line_empty_line():
    stream = io.StringIO("\nx\n")
    assert read_line(stream) == ""
    assert read_line(stream) == "x"


def test_read_line_truncates_long_lines():
    stream = io.StringIO("x" * (MAX_LINE + 10) + "\n")
    first = read_line(stream)
    assert len(first) == MAX_LINE
    assert read_line(stream) == "x" * 10


def test_unclosed_quote_is_status_2():
    shell = Shell(_env(), False)
    assert shell.execute_line("echo 'abc") == 2
    assert shell.last_status == 2


def test_leading_pipe_is_syntax_error():
    shell = Shell(_env(), False)
    assert shell.execute_line("| ls") == 2


def test_missing_redirect_target_is_syntax_error():
    shell = Shell(_env(), False)
    assert shell.execute_line("echo >") == 2


def test_blank_line_gives_status_2():
    shell = Shell(_env(), False)
    assert shell.execute_line("   ") == 2


def test_true_and_false():
    shell = Shell(_env(), False)
    assert shell.execute_line("true") == 0
    assert shell.execute_line("false") == 1


def test_command_not_found():
    shell = Shell(_env(), False)
    assert shell.execute_line("no_such_command_here_xyz") == 127


def test_output_redirect(tmp_path):
    shell = Shell(_env(), False)
    target = tmp_path / "out"
    assert shell.execute_line("echo hello > " + str(target)) == 0
    assert target.read_text() == "hello\n"


def test_variable_expansion(tmp_path):
    shell = Shell(_env(GREETING="hi there"), False)
    target = tmp_path / "out"
    shell.execute_line('echo "$GREETING" > ' + str(target))
    assert target.read_text() == "hi there\n"


def test_last_status_expands(tmp_path):
    shell = Shell(_env(), False)
    target = tmp_path / "out"
    shell.execute_line("false")
    shell.execute_line("echo $? > " + str(target))
    assert target.read_text() == "1\n"


def test_ambiguous_redirect(capsys):
    shell = Shell(_env(), False)
    assert shell.execute_line("echo hi > $NOPE_UNSET") == 1
    assert "ambiguous redirect" in capsys.readouterr().err


def test_pipeline(tmp_path):
    shell = Shell(_env(), False)
    target = tmp_path / "out"
    assert shell.execute_line("echo abc | cat > " + str(target)) == 0
    assert target.read_text() == "abc\n"


def test_loop_returns_last_status():
    shell = Shell(_env(), False)
    assert shell.loop(io.StringIO("true\nfalse\n")) == 1
    assert shell.running is False


def test_loop_skips_empty_lines():
    shell = Shell(_env(), False)
    assert shell.loop(io.StringIO("\n\n")) == 0


def test_loop_heredoc(tmp_path):
    shell = Shell(_env(NAME="world"), False)
    target = tmp_path / "out"
    script = "cat << EOF > " + str(target) + "\nhello $NAME\nEOF\n"
    assert shell.loop(io.StringIO(script)) == 0
    assert target.read_text() == "hello world\n"


def test_loop_quoted_heredoc_not_expanded(tmp_path):
    shell = Shell(_env(NAME="world"), False)
    target = tmp_path / "out"
    script = "cat << 'EOF' > " + str(target) + "\nhello $NAME\nEOF\n"
    assert shell.loop(io.StringIO(script)) == 0
    assert target.read_text() == "hello $NAME\n"


def test_main_reads_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("false\n"))
    assert main([]) == 1