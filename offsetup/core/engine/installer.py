"""
Install dispatcher: runs the host's platform entry.

Picks the ``dependencies.platforms`` entries whose key names the host
platform and runs their ``pre_install`` lines, one at a time, through
a command runner.

Flow:
    manifest + identity → matching entries → plan → run (or dry-run) → report

Failure policy per entry: a failed step stops the rest of that entry,
unless the entry sets ``fail_silently``, in which case the failure is
logged and the next step runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from offsetup.adapters.base import CommandRunner, host_shell
from offsetup.core.errors import UnknownPlatformError
from offsetup.core.models.manifest import Manifest, Platform
from offsetup.core.models.receipt import CommandReceipt
from offsetup.core.platform.identity import PlatformIdentity, PlatformName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedStep:
    """One command the dispatcher intends to run."""

    platform: str
    command: str
    shell: str


@dataclass
class InstallReport:
    """Result of dispatching an install."""

    platform: str = ""
    dry_run: bool = False
    entries: list[str] = field(default_factory=list)
    planned: list[PlannedStep] = field(default_factory=list)
    receipts: list[CommandReceipt] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        """Failures that were not silenced by ``fail_silently``."""
        return sum(1 for r in self.receipts if r.failed and not r.silenced)

    @property
    def silenced(self) -> int:
        return sum(1 for r in self.receipts if r.failed and r.silenced)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "dry_run": self.dry_run,
            "status": self.status,
            "entries": self.entries,
            "planned": [
                {"platform": s.platform, "command": s.command, "shell": s.shell}
                for s in self.planned
            ],
            "succeeded": self.succeeded,
            "failed": self.failed,
            "silenced": self.silenced,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def matching_entries(
    manifest: Manifest, identity: PlatformIdentity,
) -> list[tuple[str, Platform]]:
    """Platform entries whose key names the host platform."""
    return [(key, p) for key, p in manifest.platform_entries() if identity.matches(key)]


def _run_entry(
    key: str,
    platform: Platform,
    runner: CommandRunner,
    shell: str,
) -> list[CommandReceipt]:
    receipts: list[CommandReceipt] = []
    steps = list(platform.pre_install or [])

    for index, line in enumerate(steps):
        receipt = runner.run(line, shell=shell).model_copy(update={"platform": key})

        if receipt.failed and platform.fail_silently:
            logger.warning("[%s] step failed, continuing (fail_silently): %s: %s",
                           key, line, receipt.error)
            receipts.append(receipt.model_copy(update={"silenced": True}))
            continue

        receipts.append(receipt)
        if receipt.failed:
            remaining = steps[index + 1:]
            logger.error("[%s] step failed: %s: %s", key, line, receipt.error)
            if remaining:
                logger.error("[%s] skipping %d remaining step(s)", key, len(remaining))
            receipts.extend(
                CommandReceipt.skip(rest, reason="earlier step failed",
                                    shell=shell, platform=key)
                for rest in remaining
            )
            break

        logger.info("[%s] ok: %s", key, line)

    return receipts


def install(
    manifest: Manifest,
    identity: PlatformIdentity,
    runner: CommandRunner,
    dry_run: bool | None = None,
) -> InstallReport:
    """Run the pre-install steps of every entry matching ``identity``.

    Args:
        manifest: The resolved (and validated) manifest.
        identity: The host platform.
        runner: Executes the command lines.
        dry_run: Plan only. Defaults to ``manifest.dry_run``.

    Returns:
        InstallReport with the plan and, unless dry-run, one receipt per step.

    Raises:
        UnknownPlatformError: If the host platform is Unknown and this is
            not a dry run.
    """
    if dry_run is None:
        dry_run = bool(manifest.dry_run)

    if identity.name is PlatformName.UNKNOWN and dry_run:
        logger.warning("Unrecognised platform (versions: %s); no platform entry in '%s' applies",
                       list(identity.versions), manifest.name)
        return InstallReport(platform=identity.name.value, dry_run=True)

    if identity.name is PlatformName.UNKNOWN:
        raise UnknownPlatformError(
            f"cannot install on an unrecognised platform (versions: {list(identity.versions)})"
        )

    shell = host_shell(identity.name is PlatformName.WINDOWS)
    report = InstallReport(platform=identity.name.value, dry_run=dry_run)

    entries = matching_entries(manifest, identity)
    if not entries:
        logger.warning("No platform entry for %s in manifest '%s'",
                       identity.name.manifest_key, manifest.name)

    for key, platform in entries:
        report.entries.append(key)

        if platform.skip_install:
            logger.info("[%s] skip_install is set, skipping", key)
            report.receipts.append(
                CommandReceipt.skip("", reason="skip_install", shell=shell, platform=key)
            )
            continue

        report.planned.extend(
            PlannedStep(platform=key, command=line, shell=shell)
            for line in platform.pre_install or []
        )

        if dry_run:
            continue

        report.receipts.extend(_run_entry(key, platform, runner, shell))

    logger.info("Install on %s: %s (%d ok, %d failed, %d skipped)",
                report.platform, report.status,
                report.succeeded, report.failed, report.skipped)
    return report
