"""Module unit descriptions and module-name scanning by lexing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from clice.lexer import Token, TokenKind, tokenize

__all__ = ["ModuleInfo", "PCMInfo", "scan_module_name"]

_CONDITION_OPENERS = frozenset({"if", "ifdef", "ifndef"})


@dataclass
class ModuleInfo:
    """What a module unit declares and imports."""

    #: Whether this unit has an ``export module`` declaration.
    is_interface_unit: bool = False
    #: Module name.
    name: str = ""
    #: Modules this unit depends on.
    mods: list[str] = field(default_factory=list)


@dataclass
class PCMInfo(ModuleInfo):
    """A built module interface."""

    #: PCM file path.
    path: str = ""
    #: Source file path.
    src_path: str = ""
    #: Files involved in building this PCM, modules excluded.
    deps: list[str] = field(default_factory=list)


def _read_module_name(tokens: Iterator[Token], size: int) -> str:
    parts: list[str] = []
    for token in tokens:
        # The lexer stops as soon as it has consumed the last character.
        if token.end >= size:
            break
        if token.kind in (TokenKind.RAW_IDENTIFIER, TokenKind.COLON, TokenKind.PERIOD):
            parts.append(token.text)
        else:
            break
    return "".join(parts)


def scan_module_name(content: str) -> str | None:
    """Return the module name declared by ``content``.

    An empty string means the file is not a module interface unit. ``None``
    means the ``export module`` declaration sits inside a conditional
    directive, so the name can only be found by preprocessing the file.
    """
    tokens = tokenize(content)
    in_conditional = False

    for token in tokens:
        if token.kind is TokenKind.EOF:
            break
        if not token.at_start_of_line:
            continue

        if token.kind is TokenKind.HASH:
            directive = next(tokens)
            if directive.text in _CONDITION_OPENERS:
                in_conditional = True
            elif directive.text == "endif":
                in_conditional = False
        elif token.kind is TokenKind.RAW_IDENTIFIER and token.text == "export":
            keyword = next(tokens)
            if keyword.text != "module":
                continue
            if in_conditional:
                return None
            return _read_module_name(tokens, len(content))

    return ""