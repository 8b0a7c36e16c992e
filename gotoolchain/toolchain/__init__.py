"""
Go toolchain management.

This module provides functionality for:
- Download URL construction
- Toolchain download and extraction
- GOPATH workspace preparation
- Invoking ``go get`` / ``go build`` through a configured handle
- Exported handler detection via an external helper
"""

from gotoolchain.toolchain.locator import archive_extension, build_download_url
from gotoolchain.toolchain.workspace import (
    WorkspaceLayout,
    prepare_workspace,
    workspace_layout,
)
from gotoolchain.toolchain.handle import (
    HandleOptions,
    ToolchainHandle,
    compose_environment,
    go_binary_path,
)
from gotoolchain.toolchain.provisioner import (
    is_provisioned,
    provision,
    provision_from_config,
)
from gotoolchain.toolchain.entrypoint import (
    EntryPointDetector,
    get_exported_function_name,
)

__all__ = [
    # Locator
    "archive_extension",
    "build_download_url",
    # Workspace
    "WorkspaceLayout",
    "prepare_workspace",
    "workspace_layout",
    # Handle
    "HandleOptions",
    "ToolchainHandle",
    "compose_environment",
    "go_binary_path",
    # Provisioner
    "provision",
    "provision_from_config",
    "is_provisioned",
    # Entry point
    "EntryPointDetector",
    "get_exported_function_name",
]
