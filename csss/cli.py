"""CSSS CLI — Command-line interface for the CSSS compiler.

Commands:
  csss compile <file.csss> [-o out.js]   — Transpile to JavaScript
  csss run <file.csss>                   — Transpile and run with node
  csss tokens <file.csss>                — Emit the token stream (JSON)
  csss ast <file.csss>                   — Emit the syntax tree (JSON)

Errors are printed to stdout as JSON and the process exits with status 1.
Generated code is never evaluated in this process; `run` pipes it to an
external JavaScript runtime.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import subprocess
import sys
from typing import Optional

from csss import __version__
from csss.config import CsssConfig, load_config
from csss.errors import CompileError, io_error
from csss.lexer import tokenize
from csss.parser import parse
from csss.pipeline import transpile

logger = logging.getLogger(__name__)


def _fail(message: str, path: str) -> int:
    print(io_error(message, path).to_json())
    return 1


def _read_source(args: argparse.Namespace) -> Optional[str]:
    """Validate and read the source file named on the command line."""
    source_path = args.file
    config: CsssConfig = args.config_obj
    if not config.accepts(source_path):
        _fail(f"File must have one of these extensions: {', '.join(config.extensions)}",
              source_path)
        return None
    if not os.path.exists(source_path):
        _fail(f"File not found: {source_path}", source_path)
        return None

    try:
        with open(source_path, "r", encoding="utf-8") as f:
            return f.read()
    except (IOError, OSError, UnicodeDecodeError) as e:
        _fail(f"Error reading file: {e}", source_path)
        return None


def cmd_compile(args: argparse.Namespace) -> int:
    """Transpile a CSSS source file to JavaScript."""
    source = _read_source(args)
    if source is None:
        return 1

    try:
        code = transpile(source, filename=args.file, config=args.config_obj)
    except CompileError as e:
        print(e.to_json())
        return 1

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(code)
        except (IOError, OSError) as e:
            return _fail(f"Error writing output: {e}", args.output)
        print(json.dumps({"status": "compiled", "output": args.output}))
    else:
        sys.stdout.write(code)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Transpile, then hand the JavaScript to an external runtime."""
    source = _read_source(args)
    if source is None:
        return 1

    try:
        code = transpile(source, filename=args.file, config=args.config_obj)
    except CompileError as e:
        print(e.to_json())
        return 1

    runtime = args.node or args.config_obj.node
    logger.debug("running %s with %s", args.file, runtime)
    try:
        result = subprocess.run([runtime, "-"], input=code, text=True)
    except (FileNotFoundError, PermissionError) as e:
        return _fail(f"Cannot start JavaScript runtime '{runtime}': {e}", args.file)
    return result.returncode


def cmd_tokens(args: argparse.Namespace) -> int:
    """Emit the token stream as JSON."""
    source = _read_source(args)
    if source is None:
        return 1

    try:
        tokens = tokenize(source, filename=args.file)
    except CompileError as e:
        print(e.to_json())
        return 1

    print(json.dumps([t.to_dict() for t in tokens], indent=2))
    return 0


def cmd_ast(args: argparse.Namespace) -> int:
    """Emit the syntax tree as JSON."""
    source = _read_source(args)
    if source is None:
        return 1

    try:
        program = parse(source, filename=args.file)
    except CompileError as e:
        print(e.to_json())
        return 1

    print(program.to_json())
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="csss",
        description="CSSS — transpile CSS-shaped scripts to JavaScript",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Config file (default: nearest .csssrc.yml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline details to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # compile
    p_compile = subparsers.add_parser("compile", help="Transpile CSSS source to JavaScript")
    p_compile.add_argument("file", help="CSSS source file (.css, .csss)")
    p_compile.add_argument("-o", "--output", help="Output file (default: stdout)")
    p_compile.set_defaults(func=cmd_compile)

    # run
    p_run = subparsers.add_parser("run", help="Transpile and execute with a JavaScript runtime")
    p_run.add_argument("file", help="CSSS source file (.css, .csss)")
    p_run.add_argument("--node", help="JavaScript runtime executable (default: from config)")
    p_run.set_defaults(func=cmd_run)

    # tokens
    p_tokens = subparsers.add_parser("tokens", help="Emit the token stream as JSON")
    p_tokens.add_argument("file", help="CSSS source file (.css, .csss)")
    p_tokens.set_defaults(func=cmd_tokens)

    # ast
    p_ast = subparsers.add_parser("ast", help="Emit the syntax tree as JSON")
    p_ast.add_argument("file", help="CSSS source file (.css, .csss)")
    p_ast.set_defaults(func=cmd_ast)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        args.config_obj = load_config(args.config)
    except CompileError as e:
        print(e.to_json())
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
