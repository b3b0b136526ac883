"""
Lifecycle use cases: uninstall, start and stop.

Only the dry-run description is implemented: these describe what
would happen without touching the host.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from offsetup.core.config.loader import CliOverrides, resolve
from offsetup.core.errors import OffSetupError
from offsetup.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

ACTIONS = ("uninstall", "start", "stop")


@dataclass
class LifecycleResult:
    action: str = ""
    manifest: Manifest | None = None
    lines: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def dry_run(self) -> bool:
        return bool(self.manifest and self.manifest.dry_run)


def _port_lines(manifest: Manifest) -> list[str]:
    if manifest.exposes is None:
        return []
    ports = manifest.exposes.ports
    return [
        f"{proto} port {port}"
        for proto, numbers in (("tcp", ports.tcp), ("udp", ports.udp))
        for port in numbers or []
    ]


def describe_lifecycle(
    action: str, manifest: Manifest, remove_shared: bool = False,
) -> list[str]:
    """Lines describing what ``action`` would do for ``manifest``."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown lifecycle action: {action}")

    project = f"'{manifest.name}' {manifest.version}"

    if action == "uninstall":
        lines = [f"remove project {project}"]
        lines.extend(f"remove application {name}" for name, _ in manifest.application_entries())
        lines.extend(f"undo platform entry {key}" for key, _ in manifest.platform_entries())
        if remove_shared:
            shared = [
                str(source.download.uri)
                for _, source in manifest.sources()
                if source.download is not None and source.download.shareable
            ]
            lines.append("remove shared dependencies")
            lines.extend(f"remove shared download {uri}" for uri in shared)
        return lines

    if action == "start":
        return [f"start project {project}"] + [f"listen on {p}" for p in _port_lines(manifest)]

    return [f"stop project {project}"] + [f"release {p}" for p in _port_lines(manifest)]


def run_lifecycle(
    action: str,
    config_path: Path,
    cli: CliOverrides | None = None,
    remove_shared: bool = False,
    environ: Mapping[str, str] | None = None,
) -> LifecycleResult:
    result = LifecycleResult(action=action)
    try:
        result.manifest = resolve(config_path, environ=environ, cli=cli)
    except OffSetupError as e:
        logger.debug("%s aborted", action, exc_info=True)
        result.error = str(e)
        return result

    result.lines = describe_lifecycle(action, result.manifest, remove_shared=remove_shared)
    return result
