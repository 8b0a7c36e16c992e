"""Download URL construction for Go distribution archives."""

from gotoolchain.config import DEFAULT_BASE_URL
from gotoolchain.core.platform import resolve_arch, resolve_platform


def archive_extension(platform: str) -> str:
    """
    Get the archive extension published for a platform.

    Windows distributions ship as zip; everything else as tar.gz.
    Accepts either the raw ('win32') or resolved ('windows') name.
    """
    if resolve_platform(platform) == "windows":
        return "zip"
    return "tar.gz"


def build_download_url(
    version: str, platform: str, arch: str, base_url: str = DEFAULT_BASE_URL
) -> str:
    """
    Build the distribution archive URL for a Go version.

    Args:
        version: Version string, substituted verbatim (e.g., '1.12')
        platform: Platform name, raw or resolved (e.g., 'win32', 'linux')
        arch: Architecture name, raw or resolved (e.g., 'x64', 'arm64')
        base_url: Distribution base URL

    Returns:
        Archive URL

    Example:
        >>> build_download_url("1.12", "win32", "x64")
        'https://dl.google.com/go/go1.12.windows-amd64.zip'
    """
    go_platform = resolve_platform(platform)
    go_arch = resolve_arch(arch)
    ext = archive_extension(platform)
    return f"{base_url.rstrip('/')}/go{version}.{go_platform}-{go_arch}.{ext}"


__all__ = ["DEFAULT_BASE_URL", "archive_extension", "build_download_url"]
