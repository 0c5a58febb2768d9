"""Host platform detection.

Engine artifacts are published per host platform:
    - linux-x64, linux-arm64
    - darwin-x64, darwin-arm64
    - windows-x64
"""

import platform
from dataclasses import dataclass
from typing import Tuple


class PlatformError(Exception):
    """Raised when the host platform is unsupported."""

    pass


ALL_HOST_PLATFORMS: Tuple[str, ...] = (
    "linux-x64",
    "linux-arm64",
    "darwin-x64",
    "darwin-arm64",
    "windows-x64",
)


@dataclass(frozen=True)
class HostPlatform:
    """Operating system and engine platform identifier of a host."""

    os_name: str
    identifier: str


class PlatformDetector:
    """Detects the current host platform."""

    @staticmethod
    def detect() -> HostPlatform:
        """Detect the host platform.

        Raises:
            PlatformError: If the platform is unsupported
        """
        system = platform.system().lower()
        machine = platform.machine().lower()

        if system == "windows":
            os_name = "windows"
        elif system == "linux":
            os_name = "linux"
        elif system == "darwin":
            os_name = "darwin"
        else:
            raise PlatformError(f"Unsupported platform: {system} {machine}")

        if machine in ("aarch64", "arm64") and os_name != "windows":
            arch = "arm64"
        else:
            arch = "x64"

        return HostPlatform(os_name, f"{os_name}-{arch}")
