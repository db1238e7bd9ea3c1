"""CSSS Lexer — Tokenizer with offset and line/column tracking.

Single left-to-right scan, no backtracking. Keywords are not token kinds:
`loop`, `times` and `say` all come out as plain identifiers and the parser
and generator decide what they mean.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from csss.errors import LexError, SourceLocation

logger = logging.getLogger(__name__)


class TokenType(Enum):
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    STRING = "String"
    AMPERSAND = "Ampersand"
    LBRACE = "LBrace"
    RBRACE = "RBrace"
    COLON = "Colon"
    SEMICOLON = "Semicolon"


PUNCTUATION: dict[str, TokenType] = {
    "&": TokenType.AMPERSAND,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
}

IDENT_START = frozenset(string.ascii_letters)
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "-")
DIGITS = frozenset(string.digits)


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    location: SourceLocation
    offset: int = 0

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "value": self.value,
            "offset": self.offset,
            "line": self.location.line,
            "column": self.location.column,
        }

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.location})"


class Lexer:
    """Tokenizer for CSSS source code."""

    def __init__(self, source: str, filename: str = "<stdin>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        # Trailing whitespace is insignificant; stop scanning where it starts.
        self.end = len(source.rstrip())

    def _loc(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.filename, self.pos)

    def _peek_ahead(self, offset: int = 1) -> Optional[str]:
        idx = self.pos + offset
        if idx < self.end:
            return self.source[idx]
        return None

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_comment(self) -> None:
        start, loc = self.pos, self._loc()
        self._advance()
        self._advance()
        while self.pos < self.end:
            if self.source[self.pos] == "*" and self._peek_ahead() == "/":
                self._advance()
                self._advance()
                return
            self._advance()
        raise LexError("Unterminated comment", start, loc)

    def _read_string(self) -> Token:
        start, loc = self.pos, self._loc()
        self._advance()  # opening quote
        value = ""
        while self.pos < self.end:
            ch = self._advance()
            if ch == '"':
                return Token(TokenType.STRING, value, loc, start)
            value += ch
        raise LexError("Unterminated string literal", start, loc)

    def _read_number(self) -> Token:
        start, loc = self.pos, self._loc()
        value = ""
        while self.pos < self.end and self.source[self.pos] in DIGITS:
            value += self._advance()
        return Token(TokenType.NUMBER, value, loc, start)

    def _read_identifier(self) -> Token:
        start, loc = self.pos, self._loc()
        value = ""
        while self.pos < self.end and self.source[self.pos] in IDENT_CHARS:
            value += self._advance()
        return Token(TokenType.IDENTIFIER, value, loc, start)

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while self.pos < self.end:
            ch = self.source[self.pos]

            if ch.isspace():
                self._advance()
            elif ch in IDENT_START:
                tokens.append(self._read_identifier())
            elif ch in DIGITS:
                tokens.append(self._read_number())
            elif ch == '"':
                tokens.append(self._read_string())
            elif ch == "/" and self._peek_ahead() == "*":
                self._skip_comment()
            elif ch in PUNCTUATION:
                tokens.append(Token(PUNCTUATION[ch], ch, self._loc(), self.pos))
                self._advance()
            else:
                raise LexError.unexpected(ch, self.pos, self._loc())

        logger.debug("%s: %d tokens", self.filename, len(tokens))
        return tokens


def tokenize(source: str, filename: str = "<stdin>") -> list[Token]:
    """Convenience function to tokenize CSSS source code."""
    return Lexer(source, filename).tokenize()
