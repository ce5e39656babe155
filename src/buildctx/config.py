"""Workspace discovery and ``.buildctx.json`` defaults."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from buildctx.commands.discovery import DEFAULT_STRATEGY, STRATEGIES
from buildctx.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_NAME = ".buildctx.json"
WORKSPACE_MARKERS = ("MODULE.bazel", "WORKSPACE", "WORKSPACE.bazel")

DEFAULTS = {
    "limit": 2000,
    "depth": 2,
    "include_file_types": [],
    "always_include": [],
    "filter_by_ext": True,
    "strategy": DEFAULT_STRATEGY,
    "bazel": "bazel",
}


def find_workspace_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) to the first workspace marker."""
    current = (start or Path.cwd()).resolve()
    for d in (current, *current.parents):
        if any((d / marker).is_file() for marker in WORKSPACE_MARKERS):
            return d
    return None


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(x, str) for x in value)


_CHECKS = {
    "limit": lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 0,
    "depth": lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 0,
    "include_file_types": _is_str_list,
    "always_include": _is_str_list,
    "filter_by_ext": lambda v: isinstance(v, bool),
    "strategy": lambda v: v in STRATEGIES,
    "bazel": lambda v: isinstance(v, str) and bool(v),
}


def load_config(root: Path | None) -> dict:
    """Return built-in defaults overlaid with the workspace config file.

    A missing file is fine.  Malformed JSON or a non-object document
    raises ``ConfigError``; keys with values of the wrong type are dropped
    with a warning and unknown keys are ignored.
    """
    config = {k: (list(v) if isinstance(v, list) else v) for k, v in DEFAULTS.items()}
    if root is None:
        return config
    path = root / CONFIG_NAME
    if not path.is_file():
        return config

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot load {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    for key, check in _CHECKS.items():
        if key not in data:
            continue
        value = data[key]
        if not check(value):
            logger.warning("Ignoring invalid value for '%s' in %s: %r", key, path, value)
            continue
        config[key] = value

    config["always_include"] = [
        str(p) if Path(p).is_absolute() else str(root / p)
        for p in config["always_include"]
    ]
    logger.debug("loaded config from %s", path)
    return config


def command_settings(obj: dict) -> tuple[dict, str]:
    """Load the workspace config for a command and pick the bazel binary.

    Runs inside the command rather than the group so ``--help`` works
    even when the config file is broken.
    """
    config = load_config(obj.get("root"))
    return config, obj.get("bazel") or config["bazel"]
