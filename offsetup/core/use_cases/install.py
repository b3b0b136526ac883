"""
Install use case: resolve, validate, identify the host, dispatch.

The full vertical slice behind ``offsetup install``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from offsetup.adapters.base import CommandRunner
from offsetup.adapters.shell.command import ShellCommandRunner
from offsetup.core.config.loader import CliOverrides, resolve
from offsetup.core.engine.installer import InstallReport, install
from offsetup.core.errors import OffSetupError
from offsetup.core.models.manifest import Manifest, unknown_managers
from offsetup.core.platform.identity import PlatformIdentity, current_platform
from offsetup.core.validation import ValidationError, validate_manifest

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of ``run_install``."""

    config_path: Path | None = None
    manifest: Manifest | None = None
    identity: PlatformIdentity | None = None
    report: InstallReport | None = None
    validation_errors: list[ValidationError] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        if self.error or self.validation_errors:
            return False
        return self.report is not None and self.report.all_ok

    def to_dict(self) -> dict:
        result: dict = {"config_path": str(self.config_path) if self.config_path else None}
        if self.error:
            result["error"] = self.error
        if self.validation_errors:
            result["validation_errors"] = [e.model_dump() for e in self.validation_errors]
        if self.manifest:
            result["manifest"] = {"name": self.manifest.name, "version": self.manifest.version}
        if self.identity:
            result["platform"] = self.identity.model_dump(mode="json")
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def _warn_unknown_managers(manifest: Manifest) -> None:
    for key, platform in manifest.platform_entries():
        blocks = [("system", platform.system)]
        if platform.source is not None:
            blocks.append(("source.system", platform.source.system))
        for where, system in blocks:
            for name in unknown_managers(system):
                logger.warning("Unknown package manager '%s' in dependencies.platforms.%s.%s",
                               name, key, where)


def run_install(
    config_path: Path,
    cli: CliOverrides | None = None,
    runner: CommandRunner | None = None,
    identity: PlatformIdentity | None = None,
    environ: Mapping[str, str] | None = None,
) -> InstallResult:
    """Install the project described by ``config_path`` on this host.

    Args:
        config_path: Path to offsetup.yml.
        cli: Command-line overrides.
        runner: Command runner (default: the real shell).
        identity: Host identity (default: ``current_platform()``).
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        InstallResult. Never raises for configuration or platform errors.
    """
    result = InstallResult(config_path=config_path)

    try:
        manifest = resolve(config_path, environ=environ, cli=cli)
        result.manifest = manifest

        result.validation_errors = validate_manifest(manifest)
        if result.validation_errors:
            for err in result.validation_errors:
                logger.error("Invalid manifest: %s", err)
            return result

        _warn_unknown_managers(manifest)

        result.identity = identity or current_platform()
        result.report = install(
            manifest,
            result.identity,
            runner or ShellCommandRunner(),
        )
    except OffSetupError as e:
        logger.debug("install aborted", exc_info=True)
        result.error = str(e)

    return result
