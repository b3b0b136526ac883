"""
Platform identity: what the host is, in manifest terms.

The identity selects which ``dependencies.platforms`` entry applies.
It is computed once per process by ``current_platform()``.
"""

from __future__ import annotations

import functools
import logging
import platform
import struct
from enum import Enum

from pydantic import BaseModel, ConfigDict

from offsetup.core.errors import UnknownPlatformError
from offsetup.core.platform.providers import HostIdentityProvider, OSIdentityProvider
from offsetup.core.platform.windows import windows_version_aliases

logger = logging.getLogger(__name__)


class PlatformName(str, Enum):
    ARCH = "Arch"
    CENTOS = "CentOS"
    DEBIAN = "Debian"
    MACOSX = "MacOSX"
    MANJARO = "Manjaro"
    REDHAT = "Redhat"
    UBUNTU = "Ubuntu"
    WINDOWS = "Windows"
    UNKNOWN = "Unknown"

    @property
    def manifest_key(self) -> str:
        """Key used for this platform under ``dependencies.platforms``."""
        if self is PlatformName.MACOSX:
            return "mac"
        return self.value.lower()


class Architecture(str, Enum):
    X86_32 = "x86_32"
    X86_64 = "x86_64"
    UNKNOWN = "Unknown"


class PlatformIdentity(BaseModel):
    """Resolved description of the host."""

    model_config = ConfigDict(frozen=True)

    name: PlatformName
    versions: tuple[str, ...] = ()
    architecture: Architecture = Architecture.UNKNOWN

    def matches(self, key: str) -> bool:
        """Whether a manifest platform key refers to this host."""
        key = key.lower()
        return key in (self.name.manifest_key, self.name.value.lower())


# Distribution id → platform name
_UNIX_FAMILIES: dict[str, PlatformName] = {
    "arch": PlatformName.ARCH,
    "centos": PlatformName.CENTOS,
    "debian": PlatformName.DEBIAN,
    "darwin": PlatformName.MACOSX,
    "macos": PlatformName.MACOSX,
    "osx": PlatformName.MACOSX,
    "manjaro": PlatformName.MANJARO,
    "rhel": PlatformName.REDHAT,
    "redhat": PlatformName.REDHAT,
    "ubuntu": PlatformName.UBUNTU,
}

# Version alias when the Windows version cannot be read
UNKNOWN_WINDOWS = "Unknown Windows"

_X86_MACHINES = frozenset({"x86_64", "amd64", "x64", "i386", "i486", "i586", "i686", "x86"})


def _build_architecture() -> Architecture:
    # Pointer width of this interpreter build, not of the kernel
    if platform.machine().lower() not in _X86_MACHINES:
        return Architecture.UNKNOWN
    if struct.calcsize("P") == 8:
        return Architecture.X86_64
    return Architecture.X86_32


ARCHITECTURE = _build_architecture()


def classify_unix_family(family: str) -> PlatformName:
    return _UNIX_FAMILIES.get(family.strip().lower(), PlatformName.UNKNOWN)


def resolve_platform(
    provider: OSIdentityProvider,
    architecture: Architecture = ARCHITECTURE,
) -> PlatformIdentity:
    """Resolve the identity reported by ``provider``.

    Raises:
        UnknownPlatformError: On Windows, if the product cannot be named.
    """
    if provider.is_windows():
        info = provider.windows_version_info()
        if info is None:
            logger.warning("Unable to read Windows version information")
            versions: tuple[str, ...] = (UNKNOWN_WINDOWS,)
        else:
            versions = windows_version_aliases(
                info,
                server_r2=provider.is_server_r2(),
                processor_architecture=provider.processor_architecture(),
            )
        identity = PlatformIdentity(
            name=PlatformName.WINDOWS, versions=versions, architecture=architecture,
        )
    else:
        family = provider.unix_family()
        identity = PlatformIdentity(
            name=classify_unix_family(family),
            versions=(provider.unix_version(),),
            architecture=architecture,
        )
        if identity.name is PlatformName.UNKNOWN:
            logger.warning("Unrecognised OS family: %r", family)

    logger.debug("Resolved platform: %s %s (%s)",
                 identity.name.value, list(identity.versions), identity.architecture.value)
    return identity


@functools.lru_cache(maxsize=1)
def current_platform() -> PlatformIdentity:
    """Identity of the running host, resolved once per process."""
    return resolve_platform(HostIdentityProvider())
