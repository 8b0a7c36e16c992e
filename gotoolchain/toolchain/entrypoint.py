"""
Exported handler detection.

Detection is delegated to an external helper executable: it is invoked as
``<detector> <source file>`` and prints the exported function name. This
module never parses Go source itself.
"""

import logging
import subprocess
from pathlib import Path
from typing import Union

from gotoolchain.core.exceptions import EntryPointDetectionError

logger = logging.getLogger(__name__)


class EntryPointDetector:
    """
    Runs the external detector executable.

    Example:
        >>> detector = EntryPointDetector(Path("/opt/bin/get-exported-function-name"))
        >>> detector.detect(Path("handler/main.go"))
        'Handler'
    """

    def __init__(self, binary: Union[str, Path]):
        """
        Initialize detector.

        Args:
            binary: Path to the detector executable
        """
        self.binary = Path(binary)

    def detect(self, source_path: Union[str, Path]) -> str:
        """
        Detect the exported function name of a source file.

        Args:
            source_path: Source file to inspect

        Returns:
            Trimmed function name printed by the detector

        Raises:
            EntryPointDetectionError: If the detector cannot start, exits
                non-zero, or prints nothing
        """
        cmd = [str(self.binary), str(source_path)]
        logger.debug(f"Detecting handler name for {source_path}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            logger.error(f"Failed to execute entry point detector: {e}")
            raise EntryPointDetectionError(cmd, None, reason=str(e)) from e

        if result.returncode != 0:
            raise EntryPointDetectionError(
                cmd, result.returncode, result.stdout, result.stderr
            )

        name = result.stdout.strip()
        if not name:
            raise EntryPointDetectionError(
                cmd,
                result.returncode,
                result.stdout,
                result.stderr,
                reason="detector printed no function name",
            )

        logger.debug(f"Detected exported name {name}")
        return name


def get_exported_function_name(
    source_path: Union[str, Path], binary: Union[str, Path]
) -> str:
    """Convenience wrapper around EntryPointDetector(binary).detect()."""
    return EntryPointDetector(binary).detect(source_path)


__all__ = ["EntryPointDetector", "get_exported_function_name"]
