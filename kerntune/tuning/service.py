"""
SystemReloader - asks the host to pick up persisted drop-ins.

Provides:
- sysctl reload (sysctl --system)
- udev rules reload and re-trigger (udevadm)

Reloads are best effort: callers report failures as warnings.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


class ReloadError(Exception):
    """A reload command could not be run or exited non-zero."""
    pass


@dataclass
class ReloadConfig:
    """Configuration for the reloader."""
    enabled: bool = True
    timeout: int = 30  # seconds


class SystemReloader:
    """Runs sysctl/udev reload commands."""

    def __init__(self, config: ReloadConfig = None):
        self.config = config or ReloadConfig()

    def _run_command(self, args: List[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                args, capture_output=True, text=True, check=True,
                timeout=self.config.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise ReloadError(f"{' '.join(args)} failed: {e.stderr.strip() or e.returncode}")
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ReloadError(f"{' '.join(args)} failed: {e}")

    def reload_sysctl(self) -> None:
        """
        Apply every sysctl.d drop-in.

        Raises:
            ReloadError: If the command fails
        """
        if not self.config.enabled:
            return
        self._run_command(["sysctl", "--system"])
        logger.info("sysctl settings reloaded")

    def reload_udev(self) -> None:
        """
        Reload udev rules and re-trigger block devices.

        Raises:
            ReloadError: If either command fails
        """
        if not self.config.enabled:
            return
        self._run_command(["udevadm", "control", "--reload-rules"])
        self._run_command(["udevadm", "trigger", "--subsystem-match=block"])
        logger.info("udev rules reloaded")
