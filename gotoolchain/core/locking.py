"""
Cross-process locking for toolchain installation directories.

Two processes provisioning into the same install directory would interleave
their extractions. ``install_lock`` serializes them with a ``filelock`` lock
file placed next to the install directory. Workspaces and handles are not
locked: callers keep concurrently active handles on separate roots.

Usage:
    from gotoolchain.core.locking import install_lock

    with install_lock(Path("/opt/go"), timeout=300):
        # Download and extract into /opt/go
        ...
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from gotoolchain.core.exceptions import ProvisioningLockTimeout

logger = logging.getLogger(__name__)


def get_lock_path(install_dir: Path) -> Path:
    """
    Get the lock file path guarding an install directory.

    Example:
        >>> get_lock_path(Path("/opt/go"))
        PosixPath('/opt/.go.lock')
    """
    install_dir = Path(install_dir)
    return install_dir.parent / f".{install_dir.name}.lock"


@contextmanager
def install_lock(install_dir: Path, timeout: float = 300) -> Iterator[Path]:
    """
    Hold an exclusive lock on an install directory.

    Args:
        install_dir: Toolchain installation directory
        timeout: Maximum wait time in seconds (default: 300 for long downloads)

    Yields:
        Path of the lock file

    Raises:
        ProvisioningLockTimeout: If lock can't be acquired within timeout
    """
    lock_path = get_lock_path(install_dir)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(str(lock_path), timeout=timeout)

    try:
        lock.acquire()
    except Timeout as e:
        logger.error(
            f"Could not acquire install lock for {install_dir} after {timeout}s. "
            "Another process may be provisioning this toolchain."
        )
        raise ProvisioningLockTimeout(
            f"Could not acquire install lock for {install_dir} after {timeout}s. "
            "Another process may be provisioning this toolchain."
        ) from e

    logger.debug(f"Acquired install lock: {lock_path}")
    try:
        yield lock_path
    finally:
        lock.release()
        logger.debug(f"Released install lock: {lock_path}")


__all__ = ["get_lock_path", "install_lock"]
