"""
StateReader - read/write primitives over sysfs and procfs.

Every path is given as it appears on a live host ("/proc/sys/vm/swappiness")
and resolved under ``root``. Reads raise ObservationMiss, writes raise
ApplyFailure; callers decide whether that is fatal.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional

from ..errors import ApplyFailure, ObservationMiss
from . import paths

logger = logging.getLogger(__name__)

_CPU_DIR = re.compile(r"^cpu\d+$")


class StateReader:
    """Typed access to kernel-exposed tunables."""

    def __init__(self, root: Optional[str] = None):
        """
        Args:
            root: Directory that stands in for "/". None means the live system.
        """
        self.root = Path(root) if root else Path("/")

    def resolve(self, path: str) -> Path:
        """Map a host path onto the reader's root."""
        return self.root / path.lstrip("/")

    # =========================================================================
    # Reads
    # =========================================================================

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def read_string(self, path: str) -> str:
        """Read a file and return its content with surrounding whitespace removed."""
        try:
            return self.resolve(path).read_text().strip()
        except OSError as e:
            raise ObservationMiss(path, e.strerror or str(e))
        except UnicodeDecodeError as e:
            raise ObservationMiss(path, str(e))

    def read_int(self, path: str) -> int:
        value = self.read_string(path)
        try:
            return int(value)
        except ValueError:
            raise ObservationMiss(path, f"not an integer: {value!r}")

    def read_fields(self, path: str) -> List[str]:
        """Read a file and split it on whitespace."""
        return self.read_string(path).split()

    def read_bracketed(self, path: str) -> str:
        """
        Read the active entry of a multi-choice node.

        "always [madvise] never" -> "madvise". Content without brackets is
        returned as-is.
        """
        value = self.read_string(path)
        start = value.find("[")
        end = value.find("]")
        if start < 0 or end <= start:
            return value
        return value[start + 1:end]

    def list_dir(self, path: str) -> List[str]:
        """Sorted entry names of a directory; empty if it cannot be listed."""
        try:
            return sorted(p.name for p in self.resolve(path).iterdir())
        except OSError:
            return []

    # =========================================================================
    # Writes
    # =========================================================================

    def write_string(self, path: str, value: str) -> None:
        """Write a value to a tunable. Writing the current value again is allowed."""
        target = self.resolve(path)
        try:
            with open(target, "w") as f:
                f.write(value)
        except OSError as e:
            raise ApplyFailure(path, e.strerror or str(e))
        logger.debug("wrote %r to %s", value, path)

    def write_int(self, path: str, value: int) -> None:
        self.write_string(path, str(int(value)))

    def write_int64(self, path: str, value: int) -> None:
        self.write_string(path, str(int(value)))

    def cpu_ids(self) -> List[str]:
        """Names of the cpuN directories present under the CPU base."""
        return [n for n in self.list_dir(paths.CPU_BASE) if _CPU_DIR.match(n)]

    def write_all_cpus(self, attr: str, value: str) -> None:
        """
        Write a cpufreq attribute on every CPU that exposes it.

        All CPUs are attempted; the last failure is raised afterwards.

        Raises:
            ApplyFailure: If any write failed or no CPU exposes the attribute.
        """
        last_error: Optional[ApplyFailure] = None
        written = 0

        for cpu in self.cpu_ids():
            path = f"{paths.CPU_BASE}/{cpu}/cpufreq/{attr}"
            if not self.exists(path):
                continue
            try:
                self.write_string(path, value)
                written += 1
            except ApplyFailure as e:
                last_error = e

        if last_error is not None:
            raise last_error
        if written == 0:
            raise ApplyFailure(f"{paths.CPU_BASE}/cpu*/cpufreq/{attr}", "no CPU exposes this attribute")
