"""A small command shell: tokenizing, parsing, expansion, redirections, here-documents and pipelines."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "lexer",
    "pathsearch",
    "parser",
    "expansion",
    "fields",
    "redirections",
    "signals",
    "executor",
    "shell",
]