"""Tests for GOPATH workspace preparation."""

import pytest

from gotoolchain.core.exceptions import WorkspacePreparationError
from gotoolchain.toolchain.workspace import prepare_workspace, workspace_layout


def _tree(root):
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*"))


class TestPrepareWorkspace:
    """Test prepare_workspace()."""

    def test_creates_bin_and_pkg_tuple(self, temp_dir):
        root = temp_dir / "gopath"
        layout = prepare_workspace(root, "linux", "x64")

        assert (root / "bin").is_dir()
        assert (root / "pkg" / "linux_amd64").is_dir()
        assert layout.root == root
        assert layout.bin_dir == root / "bin"
        assert layout.pkg_dir == root / "pkg" / "linux_amd64"
        assert layout.exists()

    def test_uses_resolved_names(self, temp_dir):
        root = temp_dir / "gopath"
        prepare_workspace(root, "win32", "x86")

        assert (root / "pkg" / "windows_386").is_dir()
        assert not (root / "pkg" / "win32_x86").exists()

    def test_idempotent(self, temp_dir):
        root = temp_dir / "gopath"
        prepare_workspace(root, "darwin", "x64")
        before = _tree(root)

        prepare_workspace(root, "darwin", "x64")

        assert _tree(root) == before == ["bin", "pkg", "pkg/darwin_amd64"]

    def test_existing_content_untouched(self, temp_dir):
        root = temp_dir / "gopath"
        prepare_workspace(root, "linux", "x64")
        marker = root / "bin" / "tool"
        marker.write_text("built")

        prepare_workspace(root, "linux", "x64")

        assert marker.read_text() == "built"

    def test_file_in_the_way_raises(self, temp_dir):
        root = temp_dir / "gopath"
        root.mkdir()
        (root / "bin").write_text("not a directory")

        with pytest.raises(WorkspacePreparationError, match="Failed to create"):
            prepare_workspace(root, "linux", "x64")


class TestWorkspaceLayout:
    def test_layout_does_not_touch_disk(self, temp_dir):
        layout = workspace_layout(temp_dir / "gopath", "linux", "arm64")

        assert layout.pkg_dir == temp_dir / "gopath" / "pkg" / "linux_arm64"
        assert not layout.root.exists()
        assert not layout.exists()
