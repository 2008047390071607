"""A raw C++ lexer that splits source text into tokens without preprocessing."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = ["TokenKind", "Token", "tokenize"]


class TokenKind(enum.Enum):
    """Kinds of tokens produced by :func:`tokenize`."""

    RAW_IDENTIFIER = "raw_identifier"
    NUMERIC_CONSTANT = "numeric_constant"
    STRING_LITERAL = "string_literal"
    CHAR_CONSTANT = "char_constant"
    COMMENT = "comment"
    HASH = "hash"
    HASHHASH = "hashhash"
    SEMI = "semi"
    COLON = "colon"
    COLONCOLON = "coloncolon"
    PERIOD = "period"
    ELLIPSIS = "ellipsis"
    PUNCTUATION = "punctuation"
    UNKNOWN = "unknown"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    """A token with its character offset in the lexed text."""

    kind: TokenKind
    offset: int
    text: str
    at_start_of_line: bool = False

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


_PUNCTUATORS: tuple[tuple[str, TokenKind], ...] = tuple(
    sorted(
        {
            "%:%:": TokenKind.HASHHASH,
            "...": TokenKind.ELLIPSIS,
            "<<=": TokenKind.PUNCTUATION,
            ">>=": TokenKind.PUNCTUATION,
            "->*": TokenKind.PUNCTUATION,
            "<=>": TokenKind.PUNCTUATION,
            "::": TokenKind.COLONCOLON,
            "##": TokenKind.HASHHASH,
            "%:": TokenKind.HASH,
            "->": TokenKind.PUNCTUATION,
            "++": TokenKind.PUNCTUATION,
            "--": TokenKind.PUNCTUATION,
            "<<": TokenKind.PUNCTUATION,
            ">>": TokenKind.PUNCTUATION,
            "<=": TokenKind.PUNCTUATION,
            ">=": TokenKind.PUNCTUATION,
            "==": TokenKind.PUNCTUATION,
            "!=": TokenKind.PUNCTUATION,
            "&&": TokenKind.PUNCTUATION,
            "||": TokenKind.PUNCTUATION,
            "+=": TokenKind.PUNCTUATION,
            "-=": TokenKind.PUNCTUATION,
            "*=": TokenKind.PUNCTUATION,
            "/=": TokenKind.PUNCTUATION,
            "%=": TokenKind.PUNCTUATION,
            "&=": TokenKind.PUNCTUATION,
            "|=": TokenKind.PUNCTUATION,
            "^=": TokenKind.PUNCTUATION,
            ".*": TokenKind.PUNCTUATION,
            "<:": TokenKind.PUNCTUATION,
            ":>": TokenKind.PUNCTUATION,
            "<%": TokenKind.PUNCTUATION,
            "%>": TokenKind.PUNCTUATION,
            "#": TokenKind.HASH,
            ";": TokenKind.SEMI,
            ":": TokenKind.COLON,
            ".": TokenKind.PERIOD,
            **{c: TokenKind.PUNCTUATION for c in ",{}[]()+-*/%&|^~!=<>?"},
        }.items(),
        key=lambda item: -len(item[0]),
    )
)

_STRING_PREFIXES = frozenset({"u8", "u", "U", "L", "R", "u8R", "uR", "UR", "LR"})
_CHAR_PREFIXES = frozenset({"u8", "u", "U", "L"})
_DIGITS = "0123456789"
_INVALID_DELIMITER_CHARS = frozenset(" ()\\\t\v\f\n")
_MAX_DELIMITER = 16


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c in "_$" or not c.isascii()


class _Lexer:
    def __init__(self, text: str, keep_comments: bool) -> None:
        self.text = text
        self.size = len(text)
        self.keep_comments = keep_comments
        self.pos = 0

    def _peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        return self.text[index] if index < self.size else ""

    def _continuation(self, index: int) -> int:
        """Length of a backslash-newline starting at ``index``, or 0."""
        if self.text.startswith("\\\n", index):
            return 2
        if self.text.startswith("\\\r\n", index):
            return 3
        return 0

    def _comment_end(self, start: int) -> int:
        text = self.text
        if text.startswith("/*", start):
            end = text.find("*/", start + 2)
            return self.size if end < 0 else end + 2
        index = start + 2
        while index < self.size:
            if text[index] == "\n":
                back = index - 1
                if text[back] == "\r":
                    back -= 1
                if back >= start + 2 and text[back] == "\\":
                    index += 1
                    continue
                break
            index += 1
        return index

    def tokens(self) -> Iterator[Token]:
        text = self.text
        at_start = True
        while True:
            while self.pos < self.size:
                c = text[self.pos]
                if c == "\n":
                    at_start = True
                    self.pos += 1
                elif c in " \t\r\f\v":
                    self.pos += 1
                elif c == "\\" and (length := self._continuation(self.pos)):
                    self.pos += length
                elif text.startswith("//", self.pos) or text.startswith("/*", self.pos):
                    start = self.pos
                    self.pos = self._comment_end(start)
                    if self.keep_comments:
                        yield Token(TokenKind.COMMENT, start, text[start : self.pos], at_start)
                        at_start = False
                else:
                    break

            if self.pos >= self.size:
                yield Token(TokenKind.EOF, self.size, "", at_start)
                return

            start = self.pos
            kind = self._lex_token()
            yield Token(kind, start, text[start : self.pos], at_start)
            at_start = False

    def _lex_token(self) -> TokenKind:
        text = self.text
        c = text[self.pos]

        if c in _DIGITS or (c == "." and self._peek(1) in _DIGITS and self._peek(1)):
            return self._number()

        if _is_ident_char(c):
            start = self.pos
            self._identifier()
            word = text[start : self.pos]
            quote = self._peek()
            if quote == '"' and word in _STRING_PREFIXES:
                if word.endswith("R"):
                    return self._raw_string()
                return self._quoted('"', TokenKind.STRING_LITERAL)
            if quote == "'" and word in _CHAR_PREFIXES:
                return self._quoted("'", TokenKind.CHAR_CONSTANT)
            return TokenKind.RAW_IDENTIFIER

        if c == '"':
            return self._quoted('"', TokenKind.STRING_LITERAL)
        if c == "'":
            return self._quoted("'", TokenKind.CHAR_CONSTANT)

        for punctuator, kind in _PUNCTUATORS:
            if text.startswith(punctuator, self.pos):
                self.pos += len(punctuator)
                return kind

        self.pos += 1
        return TokenKind.UNKNOWN

    def _identifier(self) -> None:
        while self.pos < self.size and _is_ident_char(self.text[self.pos]):
            self.pos += 1

    def _suffix(self) -> None:
        if self.pos < self.size and _is_ident_char(self.text[self.pos]):
            self._identifier()

    def _number(self) -> TokenKind:
        self.pos += 1
        while self.pos < self.size:
            c = self.text[self.pos]
            following = self._peek(1)
            if c in "eEpP" and following and following in "+-":
                self.pos += 2
            elif c == "'" and following and _is_ident_char(following):
                self.pos += 2
            elif _is_ident_char(c) or c == ".":
                self.pos += 1
            else:
                break
        return TokenKind.NUMERIC_CONSTANT

    def _quoted(self, quote: str, kind: TokenKind) -> TokenKind:
        self.pos += 1
        while self.pos < self.size:
            c = self.text[self.pos]
            if c == "\\":
                self.pos += 2
            elif c == quote:
                self.pos += 1
                self._suffix()
                return kind
            elif c == "\n":
                return TokenKind.UNKNOWN
            else:
                self.pos += 1
        self.pos = self.size
        return TokenKind.UNKNOWN

    def _raw_string(self) -> TokenKind:
        text = self.text
        delimiter_start = self.pos + 1
        open_paren = text.find("(", delimiter_start, delimiter_start + _MAX_DELIMITER + 1)
        delimiter = text[delimiter_start:open_paren] if open_paren >= 0 else ""
        if open_paren < 0 or _INVALID_DELIMITER_CHARS.intersection(delimiter):
            self.pos = delimiter_start
            return TokenKind.UNKNOWN

        terminator = ")" + delimiter + '"'
        end = text.find(terminator, open_paren + 1)
        if end < 0:
            self.pos = self.size
            return TokenKind.UNKNOWN
        self.pos = end + len(terminator)
        self._suffix()
        return TokenKind.STRING_LITERAL


def tokenize(content: str, ignore_comments: bool = True) -> Iterator[Token]:
    """Yield the tokens of ``content``, ending with a single EOF token.

    Comments are dropped unless ``ignore_comments`` is false, in which case
    they are yielded as :attr:`TokenKind.COMMENT` tokens.
    """
    return _Lexer(content, not ignore_comments).tokens()