"""
kerntune - Profile-based Linux kernel tunable manager

Classifies the host as server, desktop or laptop, compares live sysfs/procfs
tunables against the profile's targets, and applies, persists or reverts
the differences.

Usage:
    # As a module
    python -m kerntune suggest

    # Programmatically
    from kerntune import StateReader, ProfileClassifier, SystemScanner, ReconciliationEngine

    reader = StateReader()
    classifier = ProfileClassifier(reader)
    profile = classifier.classify()
    changes = ReconciliationEngine(reader).compute_changes(
        SystemScanner(reader).scan(), classifier.target_for(profile)
    )
"""

__version__ = "0.3.0"

from .sysfs import StateReader
from .profile import Profile, ProfileType, PowerState, ProfileClassifier, TargetValues, values_for
from .discovery import SystemScanner, SystemSnapshot
from .tuning import ReconciliationEngine, ApplyExecutor, ChangeSet, Change
from .snapshot import BackupStore, BackupRecord

__all__ = [
    # Version
    "__version__",
    # Access
    "StateReader",
    # Profiles
    "Profile",
    "ProfileType",
    "PowerState",
    "ProfileClassifier",
    "TargetValues",
    "values_for",
    # Discovery
    "SystemScanner",
    "SystemSnapshot",
    # Tuning
    "ReconciliationEngine",
    "ApplyExecutor",
    "ChangeSet",
    "Change",
    # Backup
    "BackupStore",
    "BackupRecord",
]
