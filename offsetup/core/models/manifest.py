"""
Manifest model: the typed form of offsetup.yml.

Built once per invocation by the config resolver. Every model is
frozen; overrides are applied to the raw mapping before it is
validated, never to the model afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated

from pydantic import AnyUrl, BaseModel, ConfigDict, Field

# Package managers the manifest format knows about, keyed as they
# appear under a ``system:`` block.
KNOWN_PACKAGE_MANAGERS: tuple[str, ...] = (
    # Linux
    "apt", "apt_get", "aptitude", "equo", "emerge", "flatpak", "guix",
    "nix", "openpkg", "opkg", "pacman", "ppm", "pisi", "yum", "dnf",
    "up2date", "urpmi", "slackpkg", "slapt_get", "snap", "swaret", "apk",
    # Windows
    "choco",
    # macOS
    "brew",
    # BSD
    "pkg",
    # cross-platform
    "0install",
)

Port = Annotated[int, Field(ge=0, le=65535)]

# package manager name → package arguments
System = dict[str, list[str]]


def unknown_managers(system: System | None) -> list[str]:
    """Names in a system block that are not known package managers."""
    if not system:
        return []
    return sorted(name for name in system if name not in KNOWN_PACKAGE_MANAGERS)


class _FrozenModel(BaseModel):
    # Example manifests carry keys (install_prefix, install_all, ...)
    # that are not modelled; they are dropped.
    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)


class Download(_FrozenModel):
    """A file fetched as part of a source install."""

    uri: AnyUrl
    sha512: str
    extract: bool | None = None
    shareable: bool | None = None

    @property
    def hostname(self) -> str | None:
        return self.uri.host


class Source(_FrozenModel):
    """Build-from-source instructions for a platform.

    ``download`` and ``download_directory`` must be set together;
    see ``offsetup.core.validation.validate_source``.
    """

    download_directory: str | None = None
    download: Download | None = None
    system: System | None = None


class Application(_FrozenModel):
    """A named application the project depends on."""

    pkg: str | None = None
    version: str | None = None
    env: str | None = None

    install_priority: list[str] | None = None
    skip_install: bool | None = None
    fail_silently: bool | None = None


class Platform(_FrozenModel):
    """Install instructions for one OS / distribution."""

    versions: list[str] = Field(min_length=1)
    arch: str | None = None

    source: Source | None = None
    system: System | None = None
    pre_install: list[str] | None = None

    install_priority: list[str] | None = None
    skip_install: bool | None = None
    fail_silently: bool | None = None


class Dependencies(_FrozenModel):
    applications: dict[str, Application] | None = None
    platforms: dict[str, Platform] | None = None


class Ports(_FrozenModel):
    tcp: list[Port] | None = None
    udp: list[Port] | None = None


class Exposes(_FrozenModel):
    """What the project exposes once running.

    A tagged variant: ``ports`` is currently the only kind.
    """

    ports: Ports

    @property
    def kind(self) -> str:
        return "ports"


class Manifest(_FrozenModel):
    """Root of offsetup.yml."""

    name: str
    version: str

    dependencies: Dependencies | None = None
    exposes: Exposes | None = None

    debug: bool | None = None
    dry_run: bool | None = None

    def platform_entries(self) -> Iterator[tuple[str, Platform]]:
        """Iterate ``(key, platform)`` pairs in manifest order."""
        if self.dependencies and self.dependencies.platforms:
            yield from self.dependencies.platforms.items()

    def application_entries(self) -> Iterator[tuple[str, Application]]:
        if self.dependencies and self.dependencies.applications:
            yield from self.dependencies.applications.items()

    def sources(self) -> Iterator[tuple[str, Source]]:
        """Iterate every platform source with its dotted manifest path."""
        for key, platform in self.platform_entries():
            if platform.source is not None:
                yield f"dependencies.platforms.{key}.source", platform.source
