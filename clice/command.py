"""Adjustment of compile commands taken from a compilation database."""

from __future__ import annotations

__all__ = ["mangle_command"]


def _split(command: str) -> list[str]:
    """Split a shell-quoted command on spaces, honouring single and double quotes."""
    arguments: list[str] = []
    current: list[str] = []
    in_single = in_double = False

    for c in command:
        if c == " " and not in_single and not in_double:
            if current:
                arguments.append("".join(current))
                current.clear()
        elif c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        else:
            current.append(c)

    if current:
        arguments.append("".join(current))
    return arguments


def mangle_command(command: str, resource_dir: str) -> list[str]:
    """Turn a raw compile command into the argument list used for parsing.

    The command is split into arguments, a ``-resource-dir`` option is
    appended, and ``-c``, output options (``-o`` with its value, or ``-o...``)
    and ``@CMakeFiles`` response files are removed.
    """
    arguments = _split(command)
    arguments.append(f"-resource-dir={resource_dir}")

    result: list[str] = []
    remaining = iter(arguments)
    for argument in remaining:
        if argument == "-c":
            continue
        if argument.startswith("-o"):
            if argument == "-o":
                next(remaining, None)
            continue
        if argument.startswith("@CMakeFiles"):
            continue
        result.append(argument)
    return result