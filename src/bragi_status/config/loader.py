"""YAML config loader with environment variable interpolation and overrides."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from bragi_status.config.models import StatusConfig

CONFIG_FILENAME = ".bragi-status.yaml"
ENV_PREFIX = "BRAGI_STATUS_"
ENV_SEPARATOR = "__"

# ${NAME} or ${NAME:-fallback}, as written in .bragi-status.yaml.example
_ENV_REFERENCE = re.compile(r"\$\{\s*([^}:\s]+)\s*(?::-([^}]*))?\}")


def _expand_vars(value: str, environ: Mapping[str, str]) -> str:
    """Expand ``${NAME}`` references in one config string.

    An unset variable takes its ``:-`` fallback when one is given and is left
    untouched otherwise, so a config check can still show what is missing.
    """

    def _lookup(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        if name in environ:
            return environ[name]
        return match.group(0) if fallback is None else fallback

    return _ENV_REFERENCE.sub(_lookup, value)


def _expand_tree(node: Any, environ: Mapping[str, str]) -> Any:
    if isinstance(node, str):
        return _expand_vars(node, environ)
    if isinstance(node, dict):
        return {key: _expand_tree(child, environ) for key, child in node.items()}
    if isinstance(node, list):
        return [_expand_tree(child, environ) for child in node]
    return node


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Overlay BRAGI_STATUS_SECTION__KEY=value variables onto *data*.

    e.g. ``BRAGI_STATUS_BRAGI__HOST=bragi.internal`` sets ``bragi.host``.
    """
    merged = dict(data)
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = [p.lower() for p in name[len(ENV_PREFIX):].split(ENV_SEPARATOR) if p]
        if not path:
            continue
        node = merged
        for key in path[:-1]:
            child = node.get(key)
            child = dict(child) if isinstance(child, dict) else {}
            node[key] = child
            node = child
        node[path[-1]] = value
    return merged


def find_config_file(start: Path | None = None) -> Path | None:
    """Return the nearest .bragi-status.yaml in *start* (default cwd) or a parent."""
    directory = (start or Path.cwd()).resolve()
    while True:
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if directory.parent == directory:
            return None
        directory = directory.parent


def _build(data: dict[str, Any], environ: Mapping[str, str], source: str) -> StatusConfig:
    try:
        return StatusConfig(**_apply_env_overrides(data, environ))
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {source}: {exc}") from exc


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> StatusConfig:
    """Load and validate .bragi-status.yaml, then apply environment overrides."""
    env = os.environ if environ is None else environ
    config_path = path or find_config_file()
    if not config_path or not config_path.exists():
        raise FileNotFoundError(
            f"Could not find {CONFIG_FILENAME}. Create one from .bragi-status.yaml.example or specify a path."
        )
    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid configuration in {config_path}: expected a mapping")
    return _build(_expand_tree(raw, env), env, str(config_path))


def load_env_config(environ: Mapping[str, str] | None = None) -> StatusConfig:
    """Build a config from defaults and BRAGI_STATUS_* variables alone."""
    return _build({}, os.environ if environ is None else environ, "environment")
