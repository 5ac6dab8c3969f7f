"""
Backup/restore and persistence for kerntune.

- BackupStore keeps the original values of every tunable a saved profile
  changes, in a single JSON document
- BackupRestore writes those values back on reset
- DropinWriter renders sysctl.d and udev rules so a profile survives reboots
"""

from .models import BackupRecord, RestoreResult, PathRestore
from .store import BackupStore, DEFAULT_BACKUP_FILE
from .restore import BackupRestore
from .dropins import (
    DropinWriter,
    render_sysctl,
    render_udev,
    DEFAULT_SYSCTL_DROPIN,
    DEFAULT_UDEV_RULES,
)

__all__ = [
    'BackupRecord',
    'RestoreResult',
    'PathRestore',
    'BackupStore',
    'BackupRestore',
    'DropinWriter',
    'render_sysctl',
    'render_udev',
    'DEFAULT_BACKUP_FILE',
    'DEFAULT_SYSCTL_DROPIN',
    'DEFAULT_UDEV_RULES',
]
