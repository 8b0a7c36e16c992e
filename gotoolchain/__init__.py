"""
gotoolchain - on-demand Go toolchain provisioning and invocation.

Downloads a Go distribution for a target platform/architecture, prepares an
isolated GOPATH workspace, and runs ``go get`` / ``go build`` with a composed
environment.
"""

__version__ = "0.1.0"

from gotoolchain.config import ToolchainConfig, parse_config
from gotoolchain.core.exceptions import GoToolchainError
from gotoolchain.toolchain import (
    EntryPointDetector,
    HandleOptions,
    ToolchainHandle,
    build_download_url,
    provision,
)

__all__ = [
    "__version__",
    "ToolchainConfig",
    "parse_config",
    "GoToolchainError",
    "EntryPointDetector",
    "HandleOptions",
    "ToolchainHandle",
    "build_download_url",
    "provision",
]
