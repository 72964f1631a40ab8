# minishell

A small POSIX-style command shell. It reads command lines, splits them into
tokens, checks their syntax, expands variables, reads here-documents, opens
redirections and runs the commands as child processes, either one at a time or
joined by pipes.

## Features

- Pipelines: `ls -l | grep py | wc -l`
- Redirections: `<`, `>`, `>>`, `>|` and numbered forms such as `2>errors.log`.
  A line with only redirections (`> empty.txt`) opens or creates the files and
  runs nothing.
- Here-documents with `<<`. The body is expanded unless the delimiter holds a
  quote. Body lines are read from the same input as the commands.
- Single and double quotes. An unclosed quote is reported as an error.
- Variable expansion: `$NAME`, `${NAME}` and `$?` for the last exit status.
  Nothing inside single quotes is expanded.
- Word splitting of unquoted expansions. A redirection target that expands to
  no word or to several words is reported as an "ambiguous redirect".
- Commands are looked up in the directories of `PATH`. When `PATH` is unset or
  empty, a bare name is tried as a file in the current directory.
- Exit statuses follow the usual shell rules:
  - 127 when a command is not found
  - 126 when a command is a directory or cannot be executed
  - 2 for syntax errors and unclosed quotes
  - 1 for a redirection that fails or is ambiguous
  - 128 plus the signal number when a command is killed by a signal
  - 130 when a here-document is interrupted
- `SHLVL` goes up by one when the shell starts. It wraps back to 1 above 999.

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minishell
```

When standard input is a terminal, the shell prints the prompt `minishell$ `
(and `> ` for here-document lines) on standard error. Ctrl-C at the prompt
abandons the current line, and the next line starts with `$?` set to 130. At
end of input the shell prints `exit` and stops.

It also reads commands from a pipe or a file, one per line:

```
printf 'echo hello | tr a-z A-Z\n' | minishell
```

The shell's exit status is the status of the last command it ran.

## Using it from Python

```python
import os
from minishell.shell import Shell

shell = Shell(dict(os.environ), interactive=False)
shell.execute_line("echo $HOME > home.txt")
print(shell.last_status)
```

`Shell.loop(stream)` reads and runs lines from any text stream until it ends
and returns the last status. `Shell.env` holds the environment the shell passes
to its commands.

The stages can also be used one by one:

```python
from minishell.lexer import tokenize
from minishell.parser import check_syntax, parse
from minishell.fields import expand_commands
from minishell.executor import run_commands

env = {"PATH": "/usr/bin:/bin"}
tokens = tokenize("cat < in.txt | sort > out.txt")  # UnclosedQuoteError
check_syntax(tokens)                                # ParseError
commands = parse(tokens)
expand_commands(commands, env, 0)                   # AmbiguousRedirectError
status = run_commands(commands, env, False)
```

`minishell.redirections.process_all_heredocs` fills in the bodies of
here-documents from an iterable of lines before the commands are run.

## What it does not do

- There are no built-in commands: `cd`, `export`, `unset`, `exit`, `echo`,
  `pwd` and `env` are not part of the shell. Names are always run as external
  programs, so the working directory and the environment cannot be changed
  from a command line.
- Only pipelines are understood. There is no `;`, `&&`, `||`, subshell,
  background job, globbing or backslash escaping.
- There is no line editing. Interactive lines are kept in `Shell.history` for
  the session only and are not saved.

## Running the tests

```
pip install .[test]
pytest
```