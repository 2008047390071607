"""Preamble detection: the leading directives that a precompiled header can cover."""

from __future__ import annotations

from dataclasses import dataclass, field

from clice.lexer import Token, TokenKind, tokenize

__all__ = ["PCHInfo", "compute_preamble_bound"]


@dataclass
class PCHInfo:
    """Description of a built precompiled header."""

    #: Path of the output PCH file.
    path: str = ""
    #: The content used to build this PCH.
    preamble: str = ""
    #: The command used to build this PCH.
    command: str = ""
    #: All files involved in building this PCH.
    deps: list[str] = field(default_factory=list)


def compute_preamble_bound(content: str) -> int:
    """Return the offset just past the preamble of ``content``.

    The preamble is the run of preprocessor directives at the top of the file,
    together with a leading global module fragment introducer ``module;``.
    Returns 0 when the file has no preamble.
    """
    tokens = tokenize(content)
    in_directive = False
    end: Token | None = None

    for token in tokens:
        if token.kind is TokenKind.EOF:
            break

        if in_directive:
            # Everything up to the end of the line belongs to the directive.
            if not token.at_start_of_line:
                end = token
                continue
            in_directive = False

        if token.at_start_of_line and token.kind is TokenKind.HASH:
            in_directive = True
            continue

        if (
            token.at_start_of_line
            and token.kind is TokenKind.RAW_IDENTIFIER
            and token.text == "module"
        ):
            following = next(tokens)
            # The lexer reports reaching the end of the input together with the
            # last token; a semicolon that ends the file does not count.
            if following.kind is TokenKind.SEMI and following.end < len(content):
                end = following
                continue

        break

    return end.end if end is not None else 0