"""
Centralized exception hierarchy for gotoolchain.

Every failure raised by this package derives from GoToolchainError so callers
can catch the whole family at once. Nothing here is retried or downgraded:
errors surface to the immediate caller.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class GoToolchainError(Exception):
    """Base exception for all gotoolchain errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(GoToolchainError):
    """Configuration parsing or validation error."""

    pass


class InvalidOptionError(GoToolchainError, ValueError):
    """Raised when handle options contain unknown keys or invalid values."""

    pass


# ============================================================================
# Provisioning Exceptions
# ============================================================================


class DownloadError(GoToolchainError):
    """Raised when the toolchain archive transfer does not succeed."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            msg = f"Failed to download: {url} ({status_code})"
        else:
            msg = f"Failed to download: {url}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ArchiveExtractionError(GoToolchainError):
    """Failed to extract an archive."""

    pass


class ExtractionError(ArchiveExtractionError):
    """Streaming failure while extracting the toolchain archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class ProvisioningLockTimeout(GoToolchainError):
    """Raised when the install directory lock cannot be acquired in time."""

    pass


# ============================================================================
# Workspace / Invocation Exceptions
# ============================================================================


class WorkspacePreparationError(GoToolchainError):
    """Raised when the workspace directory tree cannot be created."""

    pass


class InvocationError(GoToolchainError):
    """Raised when a toolchain or detector subprocess fails or cannot start."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
        reason: str = "",
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        cmd = " ".join(str(part) for part in self.command)
        if returncode is None:
            msg = f"Failed to execute: {cmd}"
        else:
            msg = f"Command failed with exit code {returncode}: {cmd}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class EntryPointDetectionError(InvocationError):
    """Raised when the exported handler name cannot be detected."""

    pass
