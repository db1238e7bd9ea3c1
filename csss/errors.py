"""Structured error objects for the CSSS compiler.

Every error is machine-readable. The CLI prints them as JSON, and each
carries enough context (character, offset, expected/found token) to point
at the exact failure.

The pipeline aborts on the first error: a CompileError always wraps exactly
one CsssError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    LEX_ERROR = "lex_error"
    PARSE_ERROR = "parse_error"
    GENERATOR_ERROR = "generator_error"
    CONFIG_ERROR = "config_error"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class SourceLocation:
    """Where a token starts: 1-based line/column plus 0-based character offset."""
    line: int
    column: int
    file: str = "<stdin>"
    offset: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"file": self.file, "line": self.line, "column": self.column}
        if self.offset is not None:
            d["offset"] = self.offset
        return d

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass
class CsssError:
    kind: ErrorKind
    message: str
    location: Optional[SourceLocation] = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.location:
            d["location"] = self.location.to_dict()
        if self.details:
            d["details"] = self.details
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        loc = f" at {self.location}" if self.location else ""
        return f"[{self.kind.value}]{loc}: {self.message}"


class CompileError(Exception):
    """Exception wrapping a single CsssError."""

    def __init__(self, error: CsssError):
        self.error = error
        super().__init__(str(error))

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.error.location

    def to_dict(self) -> dict[str, Any]:
        return self.error.to_dict()

    def to_json(self, indent: int = 2) -> str:
        return self.error.to_json(indent=indent)


class LexError(CompileError):
    """Unrecognised character or unterminated literal."""

    def __init__(self, message: str, offset: int,
                 location: Optional[SourceLocation] = None,
                 char: Optional[str] = None):
        self.offset = offset
        self.char = char
        details: dict[str, Any] = {"offset": offset}
        if char is not None:
            details["char"] = char
        super().__init__(CsssError(
            kind=ErrorKind.LEX_ERROR,
            message=message,
            location=location,
            details=details,
        ))

    @classmethod
    def unexpected(cls, char: str, offset: int,
                   location: Optional[SourceLocation] = None) -> LexError:
        return cls(f"Unexpected character '{char}' at position {offset}",
                   offset, location, char=char)


class ParseError(CompileError):
    """Token mismatch. A found_type of None means end of input."""

    def __init__(self, expected_type: str, found_type: Optional[str],
                 found_value: str = "", expected_value: Optional[str] = None,
                 location: Optional[SourceLocation] = None,
                 message: Optional[str] = None):
        self.expected_type = expected_type
        self.expected_value = expected_value
        self.found_type = found_type
        self.found_value = found_value

        if message is None:
            expected = expected_type
            if expected_value is not None:
                expected += f":{expected_value}"
            message = f"Expected {expected}, got {found_type or 'EOF'}:{found_value}"
        super().__init__(CsssError(
            kind=ErrorKind.PARSE_ERROR,
            message=message,
            location=location,
            details={
                "expected_type": expected_type,
                "expected_value": expected_value,
                "found_type": found_type or "EOF",
                "found_value": found_value,
            },
        ))

    @property
    def at_eof(self) -> bool:
        return self.found_type is None


class GeneratorError(CompileError):
    """A node or value shape the generator cannot render."""

    def __init__(self, message: str, node_type: Optional[str] = None,
                 location: Optional[SourceLocation] = None):
        self.node_type = node_type
        details: dict[str, Any] = {}
        if node_type is not None:
            details["node_type"] = node_type
        super().__init__(CsssError(
            kind=ErrorKind.GENERATOR_ERROR,
            message=message,
            location=location,
            details=details,
        ))


class ConfigError(CompileError):
    """Unreadable or invalid project configuration."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(CsssError(
            kind=ErrorKind.CONFIG_ERROR,
            message=message,
            details={"path": path} if path else {},
        ))


def io_error(message: str, path: str) -> CsssError:
    return CsssError(
        kind=ErrorKind.IO_ERROR,
        message=message,
        details={"path": path},
    )
