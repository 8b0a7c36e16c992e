"""
Pytest configuration and shared fixtures for gotoolchain tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.archives import go_tar_gz, go_zip


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = temp_dir / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def fake_toolchain(temp_dir: Path) -> Path:
    """Create an installed-looking Go toolchain directory (bin/go)."""
    toolchain_dir = temp_dir / "go"
    bin_dir = toolchain_dir / "bin"
    bin_dir.mkdir(parents=True)
    go = bin_dir / "go"
    go.write_text("#!/bin/sh\necho go mock\n")
    go.chmod(0o755)
    return toolchain_dir


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from gotoolchain.core import platform

    platform.clear_host_cache()
    yield
    platform.clear_host_cache()
