"""
Core functionality for gotoolchain.

This package contains the foundational modules that the toolchain layer
depends on: platform naming, streamed downloads, archive extraction and
install locking.
"""

from .exceptions import (
    GoToolchainError,
    ConfigError,
    InvalidOptionError,
    DownloadError,
    ArchiveExtractionError,
    ExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    ProvisioningLockTimeout,
    WorkspacePreparationError,
    InvocationError,
    EntryPointDetectionError,
)

from .platform import (
    PlatformArch,
    resolve_platform,
    resolve_arch,
    detect_host,
    clear_host_cache,
)

from .download import open_download, iter_chunks

from .filesystem import extract_stream, ensure_directory

from .locking import install_lock

__all__ = [
    "GoToolchainError",
    "ConfigError",
    "InvalidOptionError",
    "DownloadError",
    "ArchiveExtractionError",
    "ExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "ProvisioningLockTimeout",
    "WorkspacePreparationError",
    "InvocationError",
    "EntryPointDetectionError",
    "PlatformArch",
    "resolve_platform",
    "resolve_arch",
    "detect_host",
    "clear_host_cache",
    "open_download",
    "iter_chunks",
    "extract_stream",
    "ensure_directory",
    "install_lock",
]
