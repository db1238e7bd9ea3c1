"""CSSS Configuration — Project-level .csssrc.yml support.

Loads configuration from .csssrc.yml (or .csssrc.yaml, .csssrc.json)
found in the working directory or any parent. Allows projects to configure:
  - Indentation of generated loop bodies
  - What to do when a loop declares `times` more than once
  - Which file extensions the CLI accepts
  - Which JavaScript runtime `csss run` hands code to

Example .csssrc.yml:
    indent: 4
    duplicate_times: error     # first | last | error
    extensions:
      - ".csss"
    node: /usr/local/bin/node
    warn_undeclared: false
"""

from __future__ import annotations

import os
import json
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

import yaml

from csss.errors import ConfigError

DUPLICATE_TIMES_POLICIES = ("first", "last", "error")


@dataclass
class CsssConfig:
    """Project-level CSSS configuration."""
    # Spaces per loop nesting level in generated code
    indent: int = 2
    # Which `times` wins when a loop declares several: "first", "last", "error"
    duplicate_times: str = "last"
    # Source extensions accepted by the CLI
    extensions: List[str] = field(default_factory=lambda: [".css", ".csss"])
    # JavaScript runtime used by `csss run`
    node: str = "node"
    # Log a warning when `say`/assignments reference an undeclared name
    warn_undeclared: bool = True

    def accepts(self, filepath: str) -> bool:
        """Check if a source file has an accepted extension."""
        return any(filepath.endswith(ext) for ext in self.extensions)


# ---------------------------------------------------------------------------
# Config file names (in priority order)
# ---------------------------------------------------------------------------

_CONFIG_FILES = [
    ".csssrc.yml",
    ".csssrc.yaml",
    ".csssrc.json",
    "csss.config.yml",
    "csss.config.json",
]


def find_config(start_dir: str = ".") -> Optional[str]:
    """Find the nearest config file by walking up from start_dir."""
    current = os.path.abspath(start_dir)
    while True:
        for name in _CONFIG_FILES:
            path = os.path.join(current, name)
            if os.path.isfile(path):
                return path
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Optional[str] = None, start_dir: str = ".") -> CsssConfig:
    """Load configuration from a file.

    If no path is given, searches for a config file starting from start_dir.
    If no config file is found, returns defaults.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return CsssConfig()

    try:
        with open(path, "r") as f:
            content = f.read()
    except (IOError, OSError) as e:
        raise ConfigError(f"Cannot read config: {e}", path) from e

    if path.endswith(".json"):
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}", path) from e
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping", path)

    return _dict_to_config(data, path)


def _dict_to_config(data: Dict[str, Any], path: Optional[str] = None) -> CsssConfig:
    """Convert a parsed dict to CsssConfig."""
    config = CsssConfig()

    if "indent" in data:
        try:
            config.indent = int(data["indent"])
        except (TypeError, ValueError):
            raise ConfigError(f"indent must be an integer, got {data['indent']!r}", path)
        if config.indent < 0:
            raise ConfigError("indent must not be negative", path)
    if "duplicate_times" in data:
        config.duplicate_times = str(data["duplicate_times"])
        if config.duplicate_times not in DUPLICATE_TIMES_POLICIES:
            raise ConfigError(
                f"duplicate_times must be one of {', '.join(DUPLICATE_TIMES_POLICIES)}, "
                f"got '{config.duplicate_times}'",
                path,
            )
    if "extensions" in data and isinstance(data["extensions"], list):
        config.extensions = [str(e) for e in data["extensions"]]
    if "node" in data:
        config.node = str(data["node"])
    if "warn_undeclared" in data:
        if not isinstance(data["warn_undeclared"], bool):
            raise ConfigError(
                f"warn_undeclared must be true or false, got {data['warn_undeclared']!r}",
                path,
            )
        config.warn_undeclared = data["warn_undeclared"]

    return config
