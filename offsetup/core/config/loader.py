"""
Configuration loader: resolves offsetup.yml into a Manifest.

Layers are merged lowest to highest:

    1. the manifest file
    2. the optional run-mode overlay (config/<RUN_MODE>.yml)
    3. OFFSETUP_* environment variables
    4. CLI flags (debug, dry_run)
    5. CLI install priority, applied to every platform entry

Substructures are not validated here; callers run
``offsetup.core.validation.validate_manifest`` explicitly.
"""

from __future__ import annotations

import copy
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from offsetup.core.errors import ConfigError
from offsetup.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

# Default manifest filename
MANIFEST_FILE = "offsetup.yml"

ENV_PREFIX = "OFFSETUP_"
ENV_NESTING = "__"

# Variables read by the tool itself, not manifest keys
_TOOL_ENV_KEYS = frozenset({
    "OFFSETUP_LOG_LEVEL",
    "OFFSETUP_LOG_FILE",
    "OFFSETUP_LOG_FILE_LEVEL",
    "OFFSETUP_VERBOSITY",
})

DEFAULT_RUN_MODE = "development"

__all__ = [
    "CliOverrides",
    "ConfigError",
    "MANIFEST_FILE",
    "env_overrides",
    "find_manifest_file",
    "load_manifest_data",
    "resolve",
]


class CliOverrides(BaseModel):
    """Values parsed from the command line.

    ``None`` means the flag was not supplied and the lower layers win.
    """

    debug: bool | None = None
    dry_run: bool | None = None
    install_priority: list[str] | None = None


def find_manifest_file(start_dir: Path | None = None) -> Path | None:
    """Search for offsetup.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to offsetup.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def deep_merge(base: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``overlay`` into a copy of ``base``.

    Nested mappings merge key by key; any other value replaces.
    """
    merged = copy.deepcopy(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _parse_env_value(raw: str) -> Any:
    """Keep an env value as text unless it is a flow collection.

    ``[20.10, 22.04]`` becomes a list; its items stay strings. Scalars are
    converted by the model to the type of the field they land on.
    """
    if not raw.lstrip().startswith(("[", "{")):
        return raw
    try:
        # BaseLoader resolves no implicit types
        return yaml.load(raw, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        return raw


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Build a nested override mapping from OFFSETUP_* variables.

    ``OFFSETUP_DRY_RUN=true`` sets ``dry_run``;
    ``OFFSETUP_EXPOSES__PORTS__TCP=[80, 443]`` sets ``exposes.ports.tcp``.
    """
    overrides: dict[str, Any] = {}
    for name in sorted(environ):
        if not name.startswith(ENV_PREFIX) or name in _TOOL_ENV_KEYS:
            continue
        path = [p for p in name[len(ENV_PREFIX):].lower().split(ENV_NESTING) if p]
        if not path:
            continue

        node = overrides
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = _parse_env_value(environ[name])
        logger.debug("env override %s -> %s", name, ".".join(path))
    return overrides


def _apply_install_priority(data: dict[str, Any], priorities: list[str]) -> None:
    """Overwrite install_priority on every platform entry."""
    dependencies = data.get("dependencies")
    if not isinstance(dependencies, dict):
        return
    platforms = dependencies.get("platforms")
    if not isinstance(platforms, dict):
        return

    logger.info("overriding install priorities to: %s", priorities)
    for name, platform in platforms.items():
        if isinstance(platform, dict):
            logger.debug("setting dependencies.platforms.%s.install_priority", name)
            platform["install_priority"] = list(priorities)


def load_manifest_data(
    path: Path,
    environ: Mapping[str, str] | None = None,
    cli: CliOverrides | None = None,
) -> dict[str, Any]:
    """Merge every configuration layer into one raw mapping.

    Raises:
        ConfigError: If the manifest or its overlay cannot be read or parsed.
    """
    if environ is None:
        environ = os.environ

    if not path.is_file():
        raise ConfigError(f"Manifest file not found: {path}")

    logger.debug("loading configuration from file: %s", path)
    data = _read_yaml_mapping(path)

    run_mode = environ.get("RUN_MODE", DEFAULT_RUN_MODE)
    overlay = path.parent / "config" / f"{run_mode}.yml"
    if overlay.is_file():
        logger.debug("loading %s overlay from %s", run_mode, overlay)
        data = deep_merge(data, _read_yaml_mapping(overlay))

    logger.debug("loading configuration from environment")
    data = deep_merge(data, env_overrides(environ))

    if cli is not None:
        if cli.install_priority is not None:
            _apply_install_priority(data, cli.install_priority)
        if cli.debug is not None:
            data["debug"] = cli.debug
        if cli.dry_run is not None:
            data["dry_run"] = cli.dry_run

    return data


def resolve(
    path: Path,
    environ: Mapping[str, str] | None = None,
    cli: CliOverrides | None = None,
) -> Manifest:
    """Load the manifest at ``path`` with environment and CLI overrides.

    Args:
        path: Path to offsetup.yml.
        environ: Environment mapping (default: ``os.environ``).
        cli: Values parsed from the command line.

    Returns:
        The merged, frozen Manifest.

    Raises:
        ConfigError: If a layer is unreadable or the result does not coerce.
    """
    data = load_manifest_data(path, environ=environ, cli=cli)

    try:
        manifest = Manifest.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e

    logger.info(
        "Loaded manifest '%s' %s with %d platform entries",
        manifest.name, manifest.version, sum(1 for _ in manifest.platform_entries()),
    )
    return manifest
