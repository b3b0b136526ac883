"""
New use case: generate a starter offsetup.yml for a directory.

Scans the directory for language toolchains and describes the host
platform, then writes the manifest (unless dry-run).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from offsetup.core.config.loader import MANIFEST_FILE
from offsetup.core.models.manifest import Manifest
from offsetup.core.platform.identity import (
    Architecture,
    PlatformIdentity,
    PlatformName,
    current_platform,
)
from offsetup.core.scanning import LangDependencyName, scan

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0.1.0"

# Language → package providing its toolchain
_TOOLCHAIN_PACKAGES: dict[LangDependencyName, str] = {
    LangDependencyName.GO: "go",
    LangDependencyName.NODEJS: "nodejs",
    LangDependencyName.PYTHON: "python3",
    LangDependencyName.RUST: "rust",
}


@dataclass
class NewResult:
    path: Path | None = None
    content: str = ""
    languages: list[LangDependencyName] = field(default_factory=list)
    written: bool = False
    dry_run: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "path": str(self.path) if self.path else None,
            "languages": [lang.value for lang in self.languages],
            "written": self.written,
            "dry_run": self.dry_run,
            "error": self.error,
            "content": self.content,
        }


def build_manifest_data(
    name: str,
    languages: frozenset[LangDependencyName] | None,
    identity: PlatformIdentity,
) -> dict[str, Any]:
    """Starter manifest mapping for a project."""
    data: dict[str, Any] = {"name": name, "version": DEFAULT_VERSION}
    dependencies: dict[str, Any] = {}

    if languages:
        dependencies["applications"] = {
            lang.value.lower(): {"pkg": _TOOLCHAIN_PACKAGES[lang]}
            for lang in sorted(languages, key=lambda lang: lang.value)
        }

    if identity.name is not PlatformName.UNKNOWN and identity.versions:
        entry: dict[str, Any] = {"versions": list(identity.versions)}
        if identity.architecture is not Architecture.UNKNOWN:
            entry["arch"] = identity.architecture.value
        dependencies["platforms"] = {identity.name.manifest_key: entry}

    if dependencies:
        data["dependencies"] = dependencies
    return data


def run_new(
    directory: Path,
    identity: PlatformIdentity | None = None,
    dry_run: bool = False,
    force: bool = False,
) -> NewResult:
    """Generate ``offsetup.yml`` in ``directory``.

    Refuses to overwrite an existing manifest unless ``force`` is set.
    """
    directory = directory.resolve()
    result = NewResult(path=directory / MANIFEST_FILE, dry_run=dry_run)

    if result.path.exists() and not force and not dry_run:
        result.error = f"{result.path} already exists (use --force to overwrite)"
        return result

    languages = scan(directory)
    result.languages = sorted(languages or (), key=lambda lang: lang.value)

    data = build_manifest_data(directory.name, languages, identity or current_platform())
    # The generated file must load back
    Manifest.model_validate(data)
    result.content = yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    if dry_run:
        logger.info("dry-run: not writing %s", result.path)
        return result

    try:
        result.path.write_text(result.content, encoding="utf-8")
    except OSError as e:
        result.error = f"Cannot write {result.path}: {e}"
        return result

    result.written = True
    logger.info("Wrote %s", result.path)
    return result
