"""CSSS Parser — LL(1) recursive-descent parser.

Parses a token stream into an AST. One token of lookahead, no recovery:
the first mismatch raises ParseError and aborts the parse.

Reserved words are plain Identifier tokens; the parser classifies them at
statement start before falling back to a property declaration.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from csss.lexer import Token, TokenType, tokenize
from csss.ast_nodes import (
    Program, Rule, Statement, Declaration, Loop, NestedLoop,
    Value, Literal, Variable,
)
from csss.errors import ParseError, SourceLocation

logger = logging.getLogger(__name__)

LOOP_KEYWORD = "loop"
RESERVED_WORDS = frozenset({LOOP_KEYWORD})


class Parser:
    """LL(1) recursive-descent parser for CSSS."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>"):
        self.tokens = tokens
        self.pos = 0
        self.filename = filename

    def _current(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _peek(self) -> Optional[TokenType]:
        tok = self._current()
        return tok.type if tok else None

    def _loc(self) -> Optional[SourceLocation]:
        tok = self._current()
        if tok is not None:
            return tok.location
        if self.tokens:
            return self.tokens[-1].location
        return None

    def _expect(self, tt: TokenType, value: Optional[str] = None) -> Token:
        loc = self._loc()
        tok = self._current()
        self.pos += 1
        if tok is None:
            raise ParseError(tt.value, None, expected_value=value, location=loc)
        if tok.type != tt or (value is not None and tok.value != value):
            raise ParseError(
                tt.value, tok.type.value, tok.value,
                expected_value=value, location=tok.location,
            )
        return tok

    def _at_block_end(self) -> bool:
        return self._peek() in (None, TokenType.RBRACE)

    # -------------------------------------------------------------------
    # Top-level
    # -------------------------------------------------------------------

    def parse(self) -> Program:
        rules: list[Rule] = []
        while self._current() is not None:
            rules.append(self._parse_rule())
        logger.debug("%s: parsed %d rules", self.filename, len(rules))
        return Program(rules=rules, filename=self.filename)

    def _parse_rule(self) -> Rule:
        loc = self._loc()
        selector = self._expect(TokenType.IDENTIFIER).value
        return Rule(selector=selector, declarations=self._parse_block(), location=loc)

    def _parse_block(self) -> list[Statement]:
        self._expect(TokenType.LBRACE)
        body: list[Statement] = []
        while not self._at_block_end():
            body.append(self._parse_statement())
        self._expect(TokenType.RBRACE)
        return body

    # -------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------

    def _parse_statement(self) -> Statement:
        tok = self._current()
        if tok.type == TokenType.AMPERSAND:
            return self._parse_nested_loop()
        if tok.type == TokenType.IDENTIFIER and tok.value in RESERVED_WORDS:
            return self._parse_loop()
        return self._parse_declaration()

    def _parse_loop(self) -> Loop:
        loc = self._loc()
        self._expect(TokenType.IDENTIFIER, LOOP_KEYWORD)
        return Loop(body=self._parse_block(), location=loc)

    def _parse_nested_loop(self) -> NestedLoop:
        loc = self._loc()
        self._expect(TokenType.AMPERSAND)
        self._expect(TokenType.IDENTIFIER, LOOP_KEYWORD)
        return NestedLoop(body=self._parse_block(), location=loc)

    def _parse_declaration(self) -> Declaration:
        loc = self._loc()
        prop = self._expect(TokenType.IDENTIFIER).value
        self._expect(TokenType.COLON)
        value = self._parse_value()
        self._expect(TokenType.SEMICOLON)
        return Declaration(property=prop, value=value, location=loc)

    # -------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------

    def _parse_value(self) -> Value:
        loc = self._loc()
        tok = self._current()
        tt = tok.type if tok else None
        if tt == TokenType.NUMBER:
            self.pos += 1
            return Literal(value=self._to_int(tok), location=loc)
        if tt == TokenType.STRING:
            self.pos += 1
            return Literal(value=tok.value, location=loc)
        if tt == TokenType.IDENTIFIER:
            self.pos += 1
            return Variable(name=tok.value, location=loc)
        raise ParseError(
            "Value", tt.value if tt else None, tok.value if tok else "",
            location=loc,
        )

    @staticmethod
    def _to_int(tok: Token) -> int:
        try:
            return int(tok.value)
        except ValueError:
            # CPython caps int() on very long digit strings
            raise ParseError(
                TokenType.NUMBER.value, TokenType.NUMBER.value, tok.value[:16] + "...",
                location=tok.location,
                message=f"Number literal too large ({len(tok.value)} digits)",
            ) from None


def parse(source: Union[str, list[Token]], filename: str = "<stdin>") -> Program:
    """Parse CSSS source (or an already tokenized stream) into a Program."""
    tokens = tokenize(source, filename) if isinstance(source, str) else source
    return Parser(tokens, filename).parse()
