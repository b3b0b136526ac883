"""
Windows product names from OS version information.

The tables follow the OSVERSIONINFOEX documentation:
https://learn.microsoft.com/windows/win32/api/winnt/ns-winnt-osversioninfoexw
"""

from __future__ import annotations

from dataclasses import dataclass

from offsetup.core.errors import UnknownPlatformError
from offsetup.core.platform.release import map_build_to_release

# Win32 flags
VER_NT_WORKSTATION = 0x0000001
VER_SUITE_WH_SERVER = 0x00008000
PROCESSOR_ARCHITECTURE_AMD64 = 9


@dataclass(frozen=True)
class WindowsVersionInfo:
    """The fields of OSVERSIONINFOEX that identify a product."""

    major: int
    minor: int
    build: int
    product_type: int
    suite_mask: int = 0


# (major, minor) → (workstation name, server name)
_PRODUCT_NAMES: dict[tuple[int, int], tuple[str, str]] = {
    (10, 0): ("Windows 10", "Windows Server 2016"),
    (6, 3): ("Windows 8.1", "Windows Server 2012 R2"),
    (6, 2): ("Windows 8", "Windows Server 2012"),
    (6, 1): ("Windows 7", "Windows Server 2008 R2"),
    (6, 0): ("Windows Vista", "Windows Server 2008"),
    (5, 1): ("Windows XP", "Windows XP"),
    (5, 0): ("Windows 2000", "Windows 2000"),
}


def product_name(
    info: WindowsVersionInfo,
    *,
    server_r2: bool = False,
    processor_architecture: int = 0,
) -> str | None:
    """Name the Windows product described by ``info``.

    Version 5.2 covers Home Server, Server 2003 and XP Professional x64;
    those are told apart by the suite mask and the processor
    architecture. 5.2 on Server 2003 R2 has no name here.
    """
    workstation = info.product_type == VER_NT_WORKSTATION

    names = _PRODUCT_NAMES.get((info.major, info.minor))
    if names is not None:
        return names[0] if workstation else names[1]

    if (info.major, info.minor) == (5, 2) and not server_r2:
        if info.suite_mask & VER_SUITE_WH_SERVER == VER_SUITE_WH_SERVER:
            return "Windows Home Server"
        if workstation and processor_architecture == PROCESSOR_ARCHITECTURE_AMD64:
            return "Windows XP Professional x64 Edition"
        return "Windows Server 2003"

    return None


def windows_version_aliases(
    info: WindowsVersionInfo,
    *,
    server_r2: bool = False,
    processor_architecture: int = 0,
) -> tuple[str, ...]:
    """Version aliases: product name, build number and release label.

    Raises:
        UnknownPlatformError: If the product cannot be named.
    """
    name = product_name(
        info, server_r2=server_r2, processor_architecture=processor_architecture,
    )
    if name is None:
        raise UnknownPlatformError(
            f"unknown Windows version: {info.major}.{info.minor}.{info.build} "
            f"(product type {info.product_type})"
        )

    release = map_build_to_release(info.build)
    if release is None:
        return (name, str(info.build))
    return (name, str(info.build), release)
