"""
BackupStore - persists the backup record at a fixed location.

Absence of the file means "no backup exists".
"""

import json
import logging
from pathlib import Path
from typing import Dict

from ..errors import BackupCorrupt, BackupMissing
from .models import BackupRecord

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_FILE = Path("/etc/kerntune/backup.json")


class BackupStore:
    """Save, load and remove the single backup record."""

    def __init__(self, path: Path = DEFAULT_BACKUP_FILE):
        self.path = Path(path)

    def save(self, profile_name: str, values: Dict[str, str]) -> BackupRecord:
        """
        Write a new backup, replacing any previous one.

        Args:
            profile_name: Profile being persisted
            values: path -> original value, taken from the computed changes

        Returns:
            The record that was written
        """
        record = BackupRecord.create(profile_name, values)
        record.save(self.path)
        logger.info("backup of %d values saved to %s", len(values), self.path)
        return record

    def load(self) -> BackupRecord:
        """
        Read the backup.

        Raises:
            BackupMissing: No backup file exists
            BackupCorrupt: The file cannot be read or parsed
        """
        if not self.exists():
            raise BackupMissing(str(self.path))
        try:
            return BackupRecord.load(self.path)
        except (OSError, json.JSONDecodeError, ValueError) as e:
            raise BackupCorrupt(str(self.path), str(e))

    def exists(self) -> bool:
        return self.path.is_file()

    def remove(self) -> None:
        """Delete the backup file; a missing file is not an error."""
        self.path.unlink(missing_ok=True)
        logger.debug("backup %s removed", self.path)
