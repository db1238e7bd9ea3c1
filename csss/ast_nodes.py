"""CSSS AST Node definitions.

A Program is a list of Rules; a Rule is a selector plus a list of
statements. Statements are plain declarations or loops, and loop bodies are
statement lists themselves, so loops nest but rules do not.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from csss.errors import SourceLocation


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

@dataclass
class Value:
    location: Optional[SourceLocation] = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": type(self).__name__}


@dataclass
class Literal(Value):
    """An integer or string constant."""
    value: Union[int, str] = 0

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Literal", "value": self.value}


@dataclass
class Variable(Value):
    """A bare identifier, resolved by the target runtime."""
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Variable", "name": self.name}


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass
class Declaration:
    property: str
    value: Value
    location: Optional[SourceLocation] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "Declaration",
            "property": self.property,
            "value": self.value.to_dict(),
        }


@dataclass
class Loop:
    """`loop { ... }`"""
    body: list[Statement] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "body": [s.to_dict() for s in self.body],
        }


@dataclass
class NestedLoop(Loop):
    """`&loop { ... }`"""
    pass


Statement = Union[Declaration, Loop, NestedLoop]


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------

@dataclass
class Rule:
    selector: str
    declarations: list[Statement] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "Rule",
            "selector": self.selector,
            "declarations": [d.to_dict() for d in self.declarations],
        }


@dataclass
class Program:
    rules: list[Rule] = field(default_factory=list)
    filename: str = "<stdin>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "Program",
            "filename": self.filename,
            "rules": [r.to_dict() for r in self.rules],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
