"""
Unit tests for install directory locking.
"""

from pathlib import Path

import pytest
from filelock import FileLock

from gotoolchain.core.exceptions import ProvisioningLockTimeout
from gotoolchain.core.locking import get_lock_path, install_lock


class TestGetLockPath:
    def test_lock_is_sibling_of_install_dir(self):
        assert get_lock_path(Path("/opt/go")) == Path("/opt/.go.lock")


class TestInstallLock:
    """Tests for install_lock()."""

    def test_acquire_and_release(self, temp_dir):
        install_dir = temp_dir / "go"

        with install_lock(install_dir, timeout=1) as lock_path:
            assert lock_path == temp_dir / ".go.lock"

        # Released: can be taken again immediately
        with install_lock(install_dir, timeout=1):
            pass

    def test_creates_parent_directory(self, temp_dir):
        install_dir = temp_dir / "nested" / "go"

        with install_lock(install_dir, timeout=1) as lock_path:
            assert lock_path.parent.is_dir()

    def test_timeout_when_held(self, temp_dir):
        install_dir = temp_dir / "go"
        other = FileLock(str(get_lock_path(install_dir)))
        other.acquire()
        try:
            with pytest.raises(ProvisioningLockTimeout, match="Could not acquire"):
                with install_lock(install_dir, timeout=0.1):
                    pass
        finally:
            other.release()

    def test_released_when_body_raises(self, temp_dir):
        install_dir = temp_dir / "go"

        with pytest.raises(RuntimeError):
            with install_lock(install_dir, timeout=1):
                raise RuntimeError("boom")

        with install_lock(install_dir, timeout=0.1):
            pass
