"""Load and validate .wikiparser/config.yaml."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from wikiparser.errors import WikiParserError
from wikiparser.parse import ON_MALFORMED_CHOICES
from wikiparser.records import DEFAULT_LINK_ROOT

log = logging.getLogger(__name__)

CONFIG_DIR = ".wikiparser"
CONFIG_FILE = "config.yaml"

# Default config values
DEFAULTS: dict[str, Any] = {
    "link_root": DEFAULT_LINK_ROOT,
    "on_malformed": "paragraph",
    "workers": 1,
    "output": {
        "indent": 2,
        "ensure_ascii": False,
    },
}

# Default config template
CONFIG_TEMPLATE = """\
# Prefix for internal-link URLs: [[Golang]] -> /page/Golang
link_root: /page/

# What to do with a heading or link line that never closes:
#   paragraph  keep the line as a paragraph and log a warning
#   error      stop and report the line number
on_malformed: paragraph

# Thread pool size for line parsing (1 = no pool)
workers: 1

output:
  indent: 2  # null for compact JSON
  ensure_ascii: false
"""


class ConfigError(WikiParserError):
    """Raised when config is invalid or missing."""


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively. Override wins on conflicts."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate(config: dict) -> None:
    """Validate field types and ranges in config."""
    link_root = config.get("link_root")
    if not isinstance(link_root, str) or not link_root:
        raise ConfigError("'link_root' must be a non-empty string")

    policy = config.get("on_malformed")
    if policy not in ON_MALFORMED_CHOICES:
        raise ConfigError(
            f"Unsupported on_malformed '{policy}'. Built-in: {', '.join(ON_MALFORMED_CHOICES)}."
        )

    workers = config.get("workers")
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ConfigError(f"'workers' must be an integer >= 1, got {workers!r}")

    output = config.get("output")
    if not isinstance(output, dict):
        raise ConfigError("'output' must be a mapping")
    indent = output.get("indent")
    if indent is not None and (not isinstance(indent, int) or isinstance(indent, bool) or indent < 0):
        raise ConfigError(f"'output.indent' must be null or an integer >= 0, got {indent!r}")
    if not isinstance(output.get("ensure_ascii"), bool):
        raise ConfigError("'output.ensure_ascii' must be a boolean")


def config_path_for(project_root: Path) -> Path:
    return project_root / CONFIG_DIR / CONFIG_FILE


def load_config(project_root: Path | None = None, config_path: Path | None = None) -> dict:
    """Load config and merge it over DEFAULTS.

    An explicit *config_path* must exist. Otherwise
    ``<project_root>/.wikiparser/config.yaml`` is used when present (cwd if
    project_root is None), and a copy of DEFAULTS when it is not.
    """
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config not found: {path}")
    else:
        root = Path(project_root) if project_root else Path.cwd()
        path = config_path_for(root)
        if not path.exists():
            log.debug("No config at %s, using defaults", path)
            return copy.deepcopy(DEFAULTS)

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    config = _deep_merge(copy.deepcopy(DEFAULTS), raw)
    _validate(config)
    log.debug("Loaded config from %s", path)
    return config
