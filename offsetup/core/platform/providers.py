"""
OS identity providers: where host facts come from.

Resolution logic in ``identity`` only talks to an ``OSIdentityProvider``.
``HostIdentityProvider`` reads the running machine; ``StaticIdentityProvider``
returns fixed answers for tests and tooling.
"""

from __future__ import annotations

import logging
import platform
import sys
from abc import ABC, abstractmethod

import distro

from offsetup.core.platform.windows import WindowsVersionInfo

logger = logging.getLogger(__name__)

# GetSystemMetrics index for "is Windows Server 2003 R2"
SM_SERVERR2 = 89


class OSIdentityProvider(ABC):
    """Capability interface over the host's OS identification facilities."""

    @abstractmethod
    def is_windows(self) -> bool:
        """Whether the host runs Windows."""

    @abstractmethod
    def unix_family(self) -> str:
        """Distribution id (``ubuntu``, ``arch``...) or ``darwin`` on macOS."""

    @abstractmethod
    def unix_version(self) -> str:
        """Raw OS version string."""

    @abstractmethod
    def windows_version_info(self) -> WindowsVersionInfo | None:
        """OS version info, or None if it could not be read."""

    @abstractmethod
    def is_server_r2(self) -> bool:
        """Whether the host is Windows Server 2003 R2."""

    @abstractmethod
    def processor_architecture(self) -> int:
        """Native processor architecture (PROCESSOR_ARCHITECTURE_*)."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class StaticIdentityProvider(OSIdentityProvider):
    """Provider with fixed answers."""

    def __init__(
        self,
        *,
        family: str = "",
        version: str = "",
        windows: WindowsVersionInfo | None = None,
        server_r2: bool = False,
        processor_architecture: int = 0,
    ):
        self._family = family
        self._version = version
        self._windows = windows
        self._server_r2 = server_r2
        self._processor_architecture = processor_architecture

    def is_windows(self) -> bool:
        return self._windows is not None

    def unix_family(self) -> str:
        return self._family

    def unix_version(self) -> str:
        return self._version

    def windows_version_info(self) -> WindowsVersionInfo | None:
        return self._windows

    def is_server_r2(self) -> bool:
        return self._server_r2

    def processor_architecture(self) -> int:
        return self._processor_architecture


class HostIdentityProvider(OSIdentityProvider):
    """Reads the running host.

    Linux distributions come from the ``distro`` package, macOS from
    ``platform.mac_ver``. On Windows the version is read with
    ``RtlGetVersion``, which is not subject to the compatibility shims
    that make ``GetVersionEx`` lie to unmanifested processes.
    """

    def is_windows(self) -> bool:
        return sys.platform == "win32"

    def unix_family(self) -> str:
        if sys.platform == "darwin":
            return "darwin"
        return distro.id()

    def unix_version(self) -> str:
        if sys.platform == "darwin":
            return platform.mac_ver()[0]
        return distro.version(best=True)

    def windows_version_info(self) -> WindowsVersionInfo | None:
        import ctypes
        from ctypes import wintypes

        class OSVERSIONINFOEXW(ctypes.Structure):
            _fields_ = [
                ("dwOSVersionInfoSize", wintypes.DWORD),
                ("dwMajorVersion", wintypes.DWORD),
                ("dwMinorVersion", wintypes.DWORD),
                ("dwBuildNumber", wintypes.DWORD),
                ("dwPlatformId", wintypes.DWORD),
                ("szCSDVersion", wintypes.WCHAR * 128),
                ("wServicePackMajor", wintypes.WORD),
                ("wServicePackMinor", wintypes.WORD),
                ("wSuiteMask", wintypes.WORD),
                ("wProductType", ctypes.c_ubyte),
                ("wReserved", ctypes.c_ubyte),
            ]

        info = OSVERSIONINFOEXW()
        info.dwOSVersionInfoSize = ctypes.sizeof(OSVERSIONINFOEXW)
        status = ctypes.WinDLL("ntdll").RtlGetVersion(ctypes.byref(info))
        if status != 0:  # STATUS_SUCCESS
            logger.debug("RtlGetVersion failed with status %#x", status)
            return None

        return WindowsVersionInfo(
            major=info.dwMajorVersion,
            minor=info.dwMinorVersion,
            build=info.dwBuildNumber,
            product_type=info.wProductType,
            suite_mask=info.wSuiteMask,
        )

    def is_server_r2(self) -> bool:
        import ctypes

        return ctypes.WinDLL("user32").GetSystemMetrics(SM_SERVERR2) != 0

    def processor_architecture(self) -> int:
        import ctypes
        from ctypes import wintypes

        class SYSTEM_INFO(ctypes.Structure):
            _fields_ = [
                ("wProcessorArchitecture", wintypes.WORD),
                ("wReserved", wintypes.WORD),
                ("dwPageSize", wintypes.DWORD),
                ("lpMinimumApplicationAddress", wintypes.LPVOID),
                ("lpMaximumApplicationAddress", wintypes.LPVOID),
                ("dwActiveProcessorMask", ctypes.c_size_t),
                ("dwNumberOfProcessors", wintypes.DWORD),
                ("dwProcessorType", wintypes.DWORD),
                ("dwAllocationGranularity", wintypes.DWORD),
                ("wProcessorLevel", wintypes.WORD),
                ("wProcessorRevision", wintypes.WORD),
            ]

        info = SYSTEM_INFO()
        ctypes.WinDLL("kernel32").GetSystemInfo(ctypes.byref(info))
        return info.wProcessorArchitecture
