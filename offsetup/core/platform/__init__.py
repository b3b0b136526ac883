"""
Host platform resolution.

    from offsetup.core.platform import current_platform, PlatformName
"""

from offsetup.core.platform.identity import (
    ARCHITECTURE,
    Architecture,
    PlatformIdentity,
    PlatformName,
    current_platform,
    resolve_platform,
)
from offsetup.core.platform.providers import (
    HostIdentityProvider,
    OSIdentityProvider,
    StaticIdentityProvider,
)
from offsetup.core.platform.release import map_build_to_release
from offsetup.core.platform.windows import WindowsVersionInfo

__all__ = [
    "ARCHITECTURE",
    "Architecture",
    "HostIdentityProvider",
    "OSIdentityProvider",
    "PlatformIdentity",
    "PlatformName",
    "StaticIdentityProvider",
    "WindowsVersionInfo",
    "current_platform",
    "map_build_to_release",
    "resolve_platform",
]
