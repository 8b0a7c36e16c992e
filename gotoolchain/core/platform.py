"""
Platform/architecture name resolution for gotoolchain.

Host identifiers (``win32``, ``x64``, ...) differ from the names the Go
distribution uses (``windows``, ``amd64``, ...). Every URL and workspace path
is built from resolved names; raw host strings never reach the toolchain.

Usage:
    from gotoolchain.core.platform import detect_host, resolve_arch

    host = detect_host()
    print(host.resolved().tuple_name())  # e.g. 'linux_amd64'
    print(resolve_arch("x64"))           # 'amd64'
"""

import functools
import platform as _platform
import sys
from dataclasses import dataclass

PLATFORM_MAP = {"win32": "windows"}
ARCH_MAP = {"x64": "amd64", "x86": "386"}


def resolve_platform(raw: str) -> str:
    """
    Map a host platform name to the Go distribution name.

    Unmapped names are returned unchanged.

    Example:
        >>> resolve_platform("win32")
        'windows'
        >>> resolve_platform("linux")
        'linux'
    """
    return PLATFORM_MAP.get(raw, raw)


def resolve_arch(raw: str) -> str:
    """
    Map a host architecture name to the Go distribution name.

    Unmapped names are returned unchanged.

    Example:
        >>> resolve_arch("x64")
        'amd64'
        >>> resolve_arch("arm64")
        'arm64'
    """
    return ARCH_MAP.get(raw, raw)


@dataclass(frozen=True)
class PlatformArch:
    """
    A platform/architecture pair.

    Attributes:
        platform: Platform identifier ('linux', 'darwin', 'win32', ...)
        arch: Architecture identifier ('x64', 'x86', 'arm64', ...)
    """

    platform: str
    arch: str

    def resolved(self) -> "PlatformArch":
        """Return the pair with both names mapped to Go naming."""
        return PlatformArch(resolve_platform(self.platform), resolve_arch(self.arch))

    def tuple_name(self) -> str:
        """
        Get the ``<platform>_<arch>`` directory name used under ``pkg/``.

        Example:
            >>> PlatformArch("win32", "x64").tuple_name()
            'windows_amd64'
        """
        resolved = self.resolved()
        return f"{resolved.platform}_{resolved.arch}"

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_host() -> PlatformArch:
    """
    Detect the running host's platform and architecture.

    Names follow the raw host convention consumed by the resolvers, so
    ``detect_host().resolved()`` gives the Go names.

    This function is cached - it only runs detection once per process.
    """
    return PlatformArch(platform=_detect_platform(), arch=_detect_architecture())


def _detect_platform() -> str:
    """Return 'win32', 'darwin', 'linux', or the lower-cased sys.platform."""
    if sys.platform.startswith("win"):
        return "win32"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform.lower()


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'x86', 'arm64', 'arm', or the
        lower-cased machine name for anything else
    """
    machine = _platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_host_cache():
    """
    Clear the host detection cache.

    Forces the next call to detect_host() to re-detect. Useful for testing.
    """
    detect_host.cache_clear()


__all__ = [
    "PLATFORM_MAP",
    "ARCH_MAP",
    "PlatformArch",
    "resolve_platform",
    "resolve_arch",
    "detect_host",
    "clear_host_cache",
]
