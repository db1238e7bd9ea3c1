"""CSSS pipeline: tokenize → parse → generate.

Each stage runs to completion before the next starts. Any CompileError
aborts the whole compilation and propagates unchanged.
"""

from __future__ import annotations

import logging
from typing import Optional

from csss.config import CsssConfig
from csss.generator import JSGenerator
from csss.lexer import tokenize
from csss.parser import Parser

logger = logging.getLogger(__name__)


def transpile(source: str, filename: str = "<stdin>",
              config: Optional[CsssConfig] = None) -> str:
    """Compile CSSS source text to JavaScript source text."""
    tokens = tokenize(source, filename)
    program = Parser(tokens, filename).parse()
    code = JSGenerator(config).generate(program)
    logger.debug("%s: %d tokens, %d rules, %d bytes of JavaScript",
                 filename, len(tokens), len(program.rules), len(code))
    return code
