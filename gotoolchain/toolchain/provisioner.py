"""
Go toolchain provisioning.

This module downloads a Go distribution and installs it:
1. Build the archive URL for version/platform/arch
2. Take the install directory lock
3. Open the streamed download (non-2xx fails immediately)
4. Extract the stream into the install directory, dropping the archive's
   top-level ``go/`` directory
5. Return a ToolchainHandle bound to the installed binary

A failed download or extraction is reported, never retried or rolled back:
the install directory may be left partly populated and must not be used.
Reusing an existing install, retrying or falling back to another version is
left to the caller (see is_provisioned()).
"""

import logging
import time
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from gotoolchain.config import DEFAULT_BASE_URL, DEFAULT_GO_VERSION, ToolchainConfig
from gotoolchain.core.download import ChunkReader, iter_chunks, open_download
from gotoolchain.core.filesystem import ensure_directory, extract_stream
from gotoolchain.core.locking import install_lock
from gotoolchain.core.platform import detect_host
from gotoolchain.toolchain.handle import HandleOptions, ToolchainHandle, go_binary_path
from gotoolchain.toolchain.locator import archive_extension, build_download_url

logger = logging.getLogger(__name__)


def provision(
    install_dir: Union[str, Path],
    version: str = DEFAULT_GO_VERSION,
    platform: Optional[str] = None,
    arch: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    options: Union[HandleOptions, Mapping[str, Any], None] = None,
    use_modules: bool = False,
    timeout: int = 30,
    lock_timeout: float = 300,
) -> ToolchainHandle:
    """
    Download and install a Go toolchain, then return a handle for it.

    The install directory doubles as the handle's workspace root. Besides
    the install directory, the only file written is the install lock
    ``<install_dir.parent>/.<install_dir.name>.lock``, which is left in place
    after the lock is released (see get_lock_path()).

    Args:
        install_dir: Directory the distribution is extracted into
        version: Go version (e.g., '1.12'), substituted verbatim into the URL
        platform: Target platform (default: host platform)
        arch: Target architecture (default: host architecture)
        base_url: Distribution base URL
        options: Handle options for the returned handle
        use_modules: Force GO111MODULE=on on the returned handle
        timeout: Download connect/read timeout in seconds
        lock_timeout: Maximum wait for the install directory lock

    Returns:
        ToolchainHandle bound to ``<install_dir>/bin/go``

    Raises:
        DownloadError: If the transfer fails or the status is not 2xx
        ExtractionError: If the archive cannot be extracted
        ProvisioningLockTimeout: If another process holds the install lock
        WorkspacePreparationError: If the workspace tree cannot be created

    Example:
        >>> handle = provision(Path("/tmp/go"), "1.12", "linux", "x64")
        >>> handle.build("main.go", Path("/tmp/out/handler"))
    """
    host = detect_host()
    platform = platform or host.platform
    arch = arch or host.arch
    install_dir = Path(install_dir)

    logger.info(f"Installing go v{version} to {install_dir} for {platform} {arch}")

    url = build_download_url(version, platform, arch, base_url)
    archive_format = archive_extension(platform)

    with install_lock(install_dir, timeout=lock_timeout):
        start = time.time()
        with open_download(url, timeout=timeout) as response:
            ensure_directory(install_dir)
            reader = ChunkReader(iter_chunks(response))
            count = extract_stream(reader, install_dir, archive_format, strip_components=1)

        logger.info(
            f"Installed go v{version} ({count} files, "
            f"{reader.bytes_read / 1024 / 1024:.1f} MB) in {time.time() - start:.2f}s"
        )

    return ToolchainHandle.create(
        install_dir,
        platform,
        arch,
        options=options,
        use_modules=use_modules,
        toolchain_dir=install_dir,
    )


def provision_from_config(
    config: ToolchainConfig,
    platform: Optional[str] = None,
    arch: Optional[str] = None,
    options: Union[HandleOptions, Mapping[str, Any], None] = None,
) -> ToolchainHandle:
    """Provision using the values of a ToolchainConfig."""
    return provision(
        config.install_dir,
        version=config.version,
        platform=platform,
        arch=arch,
        base_url=config.base_url,
        options=options,
        use_modules=config.use_modules,
        timeout=config.download_timeout,
        lock_timeout=config.lock_timeout,
    )


def is_provisioned(install_dir: Union[str, Path], platform: Optional[str] = None) -> bool:
    """
    Check whether a go binary is already installed in a directory.

    Args:
        install_dir: Toolchain installation directory
        platform: Target platform (default: host platform)
    """
    platform = platform or detect_host().platform
    return go_binary_path(Path(install_dir), platform).is_file()


__all__ = ["provision", "provision_from_config", "is_provisioned"]
