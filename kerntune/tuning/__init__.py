"""
Tuning module - computes and applies changes.

Components:
- ReconciliationEngine: Diffs a SystemSnapshot against TargetValues
- ApplyExecutor: Applies changes in order with per-change accounting
- SystemReloader: Reloads sysctl/udev after drop-ins change
"""

from .changes import Change, ChangeSet, Subsystem, SuppressedSubsystem
from .engine import ReconciliationEngine
from .executor import ApplyExecutor, ApplyReport, ChangeOutcome
from .service import SystemReloader, ReloadConfig, ReloadError

__all__ = [
    "Change",
    "ChangeSet",
    "Subsystem",
    "SuppressedSubsystem",
    "ReconciliationEngine",
    "ApplyExecutor",
    "ApplyReport",
    "ChangeOutcome",
    "SystemReloader",
    "ReloadConfig",
    "ReloadError",
]
