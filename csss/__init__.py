"""CSSS — a CSS-shaped scripting language that transpiles to JavaScript."""

__version__ = "0.1.0"

from csss.errors import CompileError, LexError, ParseError, GeneratorError, ConfigError
from csss.config import CsssConfig, load_config
from csss.pipeline import transpile
