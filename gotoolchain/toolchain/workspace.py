"""
GOPATH workspace preparation.

Go only recognizes a GOPATH whose root contains ``bin/`` and
``pkg/<platform>_<arch>/`` (see ``go help gopath``), using Go's own platform
and architecture names.

Directory Structure:
    <root>/
        - bin/                   : Installed binaries
        - pkg/<goos>_<goarch>/   : Package cache for the target tuple
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from gotoolchain.core.exceptions import WorkspacePreparationError
from gotoolchain.core.platform import PlatformArch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceLayout:
    """Paths of a prepared workspace."""

    root: Path
    bin_dir: Path
    pkg_dir: Path

    def exists(self) -> bool:
        """Check whether both required subdirectories are present."""
        return self.bin_dir.is_dir() and self.pkg_dir.is_dir()


def workspace_layout(
    workspace_root: Union[str, Path], platform: str, arch: str
) -> WorkspaceLayout:
    """Compute the layout for a root without touching the filesystem."""
    root = Path(workspace_root)
    tuple_name = PlatformArch(platform, arch).tuple_name()
    return WorkspaceLayout(root=root, bin_dir=root / "bin", pkg_dir=root / "pkg" / tuple_name)


def prepare_workspace(
    workspace_root: Union[str, Path], platform: str, arch: str
) -> WorkspaceLayout:
    """
    Create the workspace directory tree.

    Idempotent: existing directories are left untouched.

    Args:
        workspace_root: Workspace (GOPATH) root
        platform: Target platform, raw or resolved
        arch: Target architecture, raw or resolved

    Returns:
        The prepared WorkspaceLayout

    Raises:
        WorkspacePreparationError: If a directory cannot be created

    Example:
        >>> layout = prepare_workspace(Path("/tmp/gopath"), "win32", "x64")
        >>> layout.pkg_dir
        PosixPath('/tmp/gopath/pkg/windows_amd64')
    """
    layout = workspace_layout(workspace_root, platform, arch)
    logger.debug(
        f"Creating GOPATH directory structure for {layout.root} "
        f"({layout.pkg_dir.name})"
    )

    for directory in (layout.bin_dir, layout.pkg_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create workspace directory {directory}: {e}")
            raise WorkspacePreparationError(
                f"Failed to create workspace directory {directory}: {e}"
            ) from e

    return layout


__all__ = ["WorkspaceLayout", "workspace_layout", "prepare_workspace"]
