"""
Configured Go toolchain handle.

A ToolchainHandle binds together the ``go`` binary, a prepared GOPATH
workspace, a working directory and the process environment every invocation
runs with. Its two operations map onto the Go command line:

- fetch_dependencies(source)  ->  go get [<source>]
- build(sources, destination) ->  go build -o <destination> <s1> [<s2> ...]

A handle holds no state between calls beyond those fixed fields. Calls on one
handle must be serialized by the caller; separate handles are independent.

Example:
    >>> handle = ToolchainHandle.create(Path("/tmp/gopath"), "linux", "x64",
    ...                                 toolchain_dir=Path("/opt/go"))
    >>> handle.fetch_dependencies("main.go")
    >>> handle.build(["main.go", "util.go"], Path("/tmp/out/handler"))
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Union

from gotoolchain.config import get_default_install_dir
from gotoolchain.core.exceptions import InvalidOptionError, InvocationError
from gotoolchain.core.platform import PlatformArch, detect_host, resolve_platform
from gotoolchain.toolchain.workspace import WorkspaceLayout, prepare_workspace

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

IOMode = Literal["inherit", "capture", "discard"]
IO_MODES = ("inherit", "capture", "discard")

# camelCase spellings accepted by HandleOptions.from_mapping
_OPTION_ALIASES = {
    "workingDirectory": "working_directory",
    "environmentOverrides": "environment_overrides",
    "ioMode": "io_mode",
}


@dataclass
class HandleOptions:
    """
    Recognized handle options.

    Attributes:
        working_directory: Directory invocations run in (default: process cwd)
        environment_overrides: Variables applied last on top of the composed
            environment
        io_mode: 'inherit' passes stdout/stderr through to the caller's
            streams, 'capture' collects them as text, 'discard' drops them
    """

    working_directory: Optional[Path] = None
    environment_overrides: Dict[str, str] = field(default_factory=dict)
    io_mode: IOMode = "inherit"

    def __post_init__(self):
        if self.io_mode not in IO_MODES:
            raise InvalidOptionError(
                f"Invalid io_mode: {self.io_mode!r} (expected one of {list(IO_MODES)})"
            )
        if self.working_directory is not None:
            self.working_directory = Path(self.working_directory)
        self.environment_overrides = {
            str(k): str(v) for k, v in dict(self.environment_overrides).items()
        }

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "HandleOptions":
        """
        Build options from a plain mapping, rejecting unknown keys.

        Raises:
            InvalidOptionError: On unknown keys or invalid values
        """
        if not options:
            return cls()

        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in ("working_directory", "environment_overrides", "io_mode"):
                raise InvalidOptionError(f"Unknown handle option: {key}")
            if name in kwargs:
                raise InvalidOptionError(f"Handle option given twice: {key}")
            kwargs[name] = value
        return cls(**kwargs)


def compose_environment(
    toolchain_bin_dir: Path,
    workspace_root: Path,
    use_modules: bool = False,
    overrides: Optional[Mapping[str, str]] = None,
    base_env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Compose the environment for toolchain invocations.

    Starting from ``base_env`` (default: os.environ), the toolchain's bin
    directory is prepended to PATH, GOPATH is bound to the workspace root,
    GO111MODULE is forced to 'on' when modules are requested, and overrides
    are applied last.

    Returns:
        A new dictionary; the inputs are never mutated
    """
    env = dict(os.environ if base_env is None else base_env)

    current_path = env.get("PATH", "")
    env["PATH"] = (
        f"{toolchain_bin_dir}{os.pathsep}{current_path}"
        if current_path
        else str(toolchain_bin_dir)
    )
    env["GOPATH"] = str(workspace_root)

    if use_modules:
        env["GO111MODULE"] = "on"

    if overrides:
        env.update(overrides)

    return env


def go_binary_path(toolchain_dir: Path, platform: str) -> Path:
    """Get the ``go`` executable inside a toolchain installation."""
    name = "go.exe" if resolve_platform(platform) == "windows" else "go"
    return Path(toolchain_dir) / "bin" / name


class ToolchainHandle:
    """
    Ready-to-invoke Go toolchain bound to one workspace.

    Create instances with ToolchainHandle.create(), which also prepares the
    workspace directory tree.
    """

    def __init__(
        self,
        workspace: WorkspaceLayout,
        toolchain_dir: Path,
        go_binary: Path,
        environment: Dict[str, str],
        working_directory: Path,
        io_mode: IOMode,
        platform: PlatformArch,
    ):
        self.workspace = workspace
        self.toolchain_dir = toolchain_dir
        self.go_binary = go_binary
        self.environment = environment
        self.working_directory = working_directory
        self.io_mode = io_mode
        self.platform = platform

    @classmethod
    def create(
        cls,
        workspace_root: PathLike,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
        options: Union[HandleOptions, Mapping[str, Any], None] = None,
        use_modules: bool = False,
        toolchain_dir: Optional[PathLike] = None,
    ) -> "ToolchainHandle":
        """
        Create a handle and prepare its workspace.

        Args:
            workspace_root: GOPATH root for this handle
            platform: Target platform (default: host platform)
            arch: Target architecture (default: host architecture)
            options: HandleOptions or a mapping of recognized option keys
            use_modules: Force GO111MODULE=on
            toolchain_dir: Go installation root (default: default install dir)

        Returns:
            Configured ToolchainHandle

        Raises:
            InvalidOptionError: If options contain unknown keys
            WorkspacePreparationError: If the workspace cannot be created
        """
        host = detect_host()
        target = PlatformArch(platform or host.platform, arch or host.arch)

        if not isinstance(options, HandleOptions):
            options = HandleOptions.from_mapping(options)

        workspace_root = Path(workspace_root)
        toolchain_dir = Path(toolchain_dir) if toolchain_dir else get_default_install_dir()
        go_binary = go_binary_path(toolchain_dir, target.platform)

        environment = compose_environment(
            toolchain_bin_dir=go_binary.parent,
            workspace_root=workspace_root,
            use_modules=use_modules,
            overrides=options.environment_overrides,
        )

        workspace = prepare_workspace(workspace_root, target.platform, target.arch)

        return cls(
            workspace=workspace,
            toolchain_dir=toolchain_dir,
            go_binary=go_binary,
            environment=environment,
            working_directory=options.working_directory or Path.cwd(),
            io_mode=options.io_mode,
            platform=target,
        )

    @property
    def workspace_root(self) -> Path:
        return self.workspace.root

    def run(self, *args: str) -> subprocess.CompletedProcess:
        """
        Run the go binary with the handle's environment and working directory.

        Args:
            *args: Arguments after the binary (e.g., 'build', '-o', 'out')

        Returns:
            The completed process (stdout/stderr set only in 'capture' mode)

        Raises:
            InvocationError: If the process cannot start or exits non-zero
        """
        cmd = [str(self.go_binary), *[str(a) for a in args]]
        logger.debug(f"Exec go {' '.join(cmd[1:])}")

        kwargs: Dict[str, Any] = {}
        if self.io_mode == "capture":
            kwargs.update(capture_output=True, text=True)
        elif self.io_mode == "discard":
            kwargs.update(stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

        try:
            result = subprocess.run(
                cmd, cwd=self.working_directory, env=self.environment, **kwargs
            )
        except OSError as e:
            logger.error(f"Failed to execute go: {e}")
            raise InvocationError(cmd, None, reason=str(e)) from e

        if result.returncode != 0:
            logger.error(f"go {' '.join(cmd[1:])} exited with {result.returncode}")
            raise InvocationError(cmd, result.returncode, result.stdout, result.stderr)

        return result

    def fetch_dependencies(
        self, source: Optional[PathLike] = None
    ) -> subprocess.CompletedProcess:
        """
        Fetch dependencies with ``go get``.

        Args:
            source: Source file whose imports are fetched; when omitted,
                dependencies of the working directory are fetched
        """
        args = ["get"]
        if source:
            logger.debug(f"Fetching go dependencies for file {source}")
            args.append(str(source))
        else:
            logger.debug(f"Fetching go dependencies for cwd {self.working_directory}")
        return self.run(*args)

    def build(
        self, sources: Union[PathLike, Sequence[PathLike]], destination: PathLike
    ) -> subprocess.CompletedProcess:
        """
        Build an executable with ``go build -o``.

        Args:
            sources: One source path or an ordered sequence of them; each is
                passed as its own compilation unit
            destination: Output executable path

        Raises:
            ValueError: If sources is an empty sequence
            InvocationError: If the build fails
        """
        if isinstance(sources, (str, os.PathLike)):
            source_list = [sources]
        else:
            source_list = list(sources)
        if not source_list:
            raise ValueError("At least one source path is required")

        logger.debug(f"Building go binary {source_list} -> {destination}")
        return self.run("build", "-o", str(destination), *[str(s) for s in source_list])

    def __repr__(self) -> str:
        return (
            f"ToolchainHandle(go={self.go_binary}, gopath={self.workspace.root}, "
            f"cwd={self.working_directory})"
        )


__all__ = [
    "IO_MODES",
    "HandleOptions",
    "ToolchainHandle",
    "compose_environment",
    "go_binary_path",
]
