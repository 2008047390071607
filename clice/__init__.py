"""Language-server building blocks: tasks, LSP framing, C++ lexing, command cleanup and position conversion."""

__version__ = "0.1.0"

__all__ = [
    "command",
    "filesystem",
    "lexer",
    "module",
    "network",
    "preamble",
    "source_converter",
    "sync",
    "tasks",
]