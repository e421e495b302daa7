"""Configuration loading.

Configuration is layered, lowest precedence first:

1. Model defaults
2. ``[tool.release-drafter]`` in the nearest ``pyproject.toml``
3. A standalone TOML file (``.github/release-drafter.toml`` by default,
   or an explicit path). A standalone file may name another file in its
   ``extends`` key; that file is merged underneath it.

Tables are merged recursively, every other value is replaced.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_drafter.config.models import ReleaseDrafterConfig
from release_drafter.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "release-drafter.toml"
CONFIG_DIR = ".github"
TOOL_KEY = "release-drafter"
EXTENDS_KEY = "extends"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-drafter]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_KEY, {}))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` onto ``base`` without mutating either."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_file(path: Path, _seen: frozenset[Path] = frozenset()) -> dict[str, Any]:
    """Load a standalone config file, resolving its ``extends`` chain."""
    path = path.resolve()
    if path in _seen:
        raise ConfigValidationError(f"Circular '{EXTENDS_KEY}' chain involving {path}")

    data = load_toml(path)
    base_name = data.pop(EXTENDS_KEY, None)
    if base_name is None:
        return data
    if not isinstance(base_name, str):
        raise ConfigValidationError(f"Invalid value for '{EXTENDS_KEY}' in {path}")

    base_path = path.parent / base_name
    logger.debug("Config %s extends %s", path, base_path)
    return deep_merge(load_config_file(base_path, _seen | {path}), data)


def validate_config(data: dict[str, Any]) -> ReleaseDrafterConfig:
    """Validate raw configuration data.

    Raises:
        ConfigValidationError: With one ``(path, message)`` pair per problem
    """
    try:
        return ReleaseDrafterConfig.model_validate(data)
    except ValidationError as e:
        errors = [
            (".".join(str(part) for part in err["loc"]) or "<root>", err["msg"])
            for err in e.errors()
        ]
        raise ConfigValidationError(
            f"Invalid configuration ({len(errors)} error(s))", errors=errors
        ) from e


def load_config(
    project_path: Path | None = None,
    config_file: Path | None = None,
) -> ReleaseDrafterConfig:
    """Load and validate configuration for a project.

    Args:
        project_path: Directory to search from (defaults to cwd)
        config_file: Explicit standalone config file; must exist

    Returns:
        Validated configuration
    """
    root = (project_path or Path.cwd()).resolve()
    data: dict[str, Any] = {}

    try:
        pyproject_path = find_pyproject_toml(root)
    except ConfigNotFoundError:
        logger.debug("No pyproject.toml found from %s", root)
    else:
        data = deep_merge(data, extract_tool_config(load_toml(pyproject_path)))

    if config_file is not None:
        path = config_file if config_file.is_absolute() else root / config_file
        data = deep_merge(data, load_config_file(path))
    else:
        default_path = root / CONFIG_DIR / DEFAULT_CONFIG_NAME
        if default_path.is_file():
            data = deep_merge(data, load_config_file(default_path))

    return validate_config(data)
