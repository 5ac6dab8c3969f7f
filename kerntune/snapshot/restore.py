"""
Backup restore - writes recorded original values back to the system.
"""

import logging

from ..errors import ApplyFailure
from ..sysfs import StateReader, paths
from .models import BackupRecord, PathRestore, RestoreResult

logger = logging.getLogger(__name__)


class BackupRestore:
    """Replays a BackupRecord against the live tree."""

    def __init__(self, writer: StateReader):
        """
        Args:
            writer: StateReader used for existence checks and writes
        """
        self.writer = writer

    def restore(self, record: BackupRecord) -> RestoreResult:
        """
        Write every recorded value back.

        Paths that no longer exist (a removed disk) are skipped. A failed
        write is recorded and the remaining paths are still attempted.
        Per-CPU cpufreq entries are recorded under cpu0 and restored on
        every CPU.

        Args:
            record: The loaded backup

        Returns:
            RestoreResult with per-path outcomes
        """
        result = RestoreResult()

        for path, value in record.values.items():
            if not self.writer.exists(path):
                logger.info("skipping %s: path no longer exists", path)
                result.skipped.append(path)
                continue

            try:
                attr = paths.per_cpu_attr(path)
                if attr:
                    self.writer.write_all_cpus(attr, value)
                else:
                    self.writer.write_string(path, value)
            except ApplyFailure as e:
                logger.warning("failed to restore %s: %s", path, e.reason)
                result.restored.append(PathRestore(path, value, success=False, error=e.reason))
            else:
                result.restored.append(PathRestore(path, value, success=True))

        return result
