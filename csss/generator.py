"""CSSS Generator — AST to JavaScript source.

Walks a Program once and returns the generated statements as one string:

    rule selector      → nothing (selectors have no runtime meaning)
    loop / &loop       → for (let i = 0; i < N; i++) { ... }
    say: value;        → console.log(value);
    times: N;          → consumed by the enclosing loop
    name: value;       → let name = value;

Induction variables are named from loop nesting depth, so a loop never
reuses the control variable of a loop it is nested in.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from csss.ast_nodes import (
    Program, Rule, Statement, Declaration, Loop, Value, Literal, Variable,
)
from csss.config import CsssConfig, DUPLICATE_TIMES_POLICIES
from csss.errors import GeneratorError

logger = logging.getLogger(__name__)

SAY = "say"
TIMES = "times"
DEFAULT_TIMES = 1

_INDUCTION_NAMES = ("i", "j", "k")


def induction_variable(depth: int) -> str:
    """Control variable name for a loop nested inside `depth` other loops."""
    if depth < len(_INDUCTION_NAMES):
        return _INDUCTION_NAMES[depth]
    return f"i{depth}"


def _is_times(stmt: Statement) -> bool:
    return isinstance(stmt, Declaration) and stmt.property == TIMES


class JSGenerator:
    """Emits JavaScript from a CSSS Program."""

    def __init__(self, config: Optional[CsssConfig] = None):
        self.config = config or CsssConfig()
        if self.config.duplicate_times not in DUPLICATE_TIMES_POLICIES:
            raise GeneratorError(
                f"Unknown duplicate_times policy '{self.config.duplicate_times}'"
            )
        self.declared_names: set[str] = set()
        # One set per JS block: top level, then each enclosing for-body.
        self._scopes: list[set[str]] = [set()]

    def generate(self, program: Program) -> str:
        if not isinstance(program, Program):
            raise GeneratorError(
                f"Unknown node type: {type(program).__name__}",
                type(program).__name__,
            )
        self.declared_names = set()
        self._scopes = [set()]
        return "".join(self._gen_rule(rule) for rule in program.rules)

    def _pad(self, depth: int) -> str:
        return " " * (self.config.indent * depth)

    # -------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------

    def _gen_rule(self, rule: Rule) -> str:
        if not isinstance(rule, Rule):
            raise GeneratorError(
                f"Unknown node type: {type(rule).__name__}", type(rule).__name__,
            )
        return "".join(self._gen_statement(s, 0) for s in rule.declarations)

    def _gen_statement(self, stmt: Statement, depth: int) -> str:
        if isinstance(stmt, Loop):
            return self._gen_loop(stmt, depth)
        if isinstance(stmt, Declaration):
            return self._gen_declaration(stmt, depth)
        raise GeneratorError(
            f"Unknown node type: {type(stmt).__name__}", type(stmt).__name__,
        )

    def _gen_loop(self, loop: Loop, depth: int) -> str:
        times = self._loop_count(loop)
        var = induction_variable(depth)
        pad = self._pad(depth)

        self._scopes.append({var})
        try:
            body = "".join(
                self._gen_statement(s, depth + 1)
                for s in loop.body if not _is_times(s)
            )
        finally:
            self._scopes.pop()

        return (
            f"{pad}for (let {var} = 0; {var} < {times}; {var}++) {{\n"
            f"{body}"
            f"{pad}}}\n"
        )

    def _loop_count(self, loop: Loop) -> int:
        counts = [s for s in loop.body if _is_times(s)]
        if not counts:
            return DEFAULT_TIMES

        for decl in counts:
            value = decl.value
            if not (isinstance(value, Literal) and type(value.value) is int):
                raise GeneratorError(
                    f"Loop count must be an integer literal, got {_describe(value)}",
                    type(loop).__name__, decl.location,
                )

        if len(counts) > 1:
            policy = self.config.duplicate_times
            if policy == "error":
                raise GeneratorError(
                    f"Loop has {len(counts)} 'times' declarations",
                    type(loop).__name__, counts[1].location,
                )
            chosen = counts[0] if policy == "first" else counts[-1]
        else:
            chosen = counts[0]
        return chosen.value.value

    def _gen_declaration(self, decl: Declaration, depth: int) -> str:
        pad = self._pad(depth)
        if decl.property == SAY:
            return f"{pad}console.log({self._render(decl.value)});\n"
        if decl.property == TIMES:
            logger.debug("dropping 'times' outside a loop at %s", decl.location)
            return ""

        rendered = self._render(decl.value)
        self.declared_names.add(decl.property)
        self._scopes[-1].add(decl.property)
        return f"{pad}let {decl.property} = {rendered};\n"

    # -------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------

    def _render(self, value: Value) -> str:
        if isinstance(value, Literal):
            if type(value.value) not in (int, str):
                raise GeneratorError(
                    f"Unsupported literal {value.value!r}", "Literal", value.location,
                )
            return json.dumps(value.value, ensure_ascii=False)
        if isinstance(value, Variable):
            self._check_declared(value)
            return value.name
        raise GeneratorError(
            f"Unknown value type: {type(value).__name__}", type(value).__name__,
        )

    def _check_declared(self, ref: Variable) -> None:
        if not self.config.warn_undeclared:
            return
        if any(ref.name in scope for scope in self._scopes):
            return
        logger.warning("'%s' is not declared in an enclosing block (%s)",
                       ref.name, ref.location)


def _describe(value: Value) -> str:
    if isinstance(value, Variable):
        return f"variable '{value.name}'"
    if isinstance(value, Literal):
        return repr(value.value)
    return type(value).__name__


def generate(program: Program, config: Optional[CsssConfig] = None) -> str:
    """Convenience function to generate JavaScript from a Program."""
    return JSGenerator(config).generate(program)
