"""
Error taxonomy for kerntune.

Detection errors never leave the scanner (they become "not observed"),
apply errors are collected per change, and only backup-load and
privilege errors abort an operation.
"""

from enum import Enum
from typing import Optional


class ErrorType(str, Enum):
    """Kinds of failures the engine distinguishes."""
    OBSERVATION_MISS = "OBSERVATION_MISS"
    APPLY_FAILURE = "APPLY_FAILURE"
    CLASSIFICATION_DEFAULT = "CLASSIFICATION_DEFAULT"
    BACKUP_MISSING = "BACKUP_MISSING"
    BACKUP_CORRUPT = "BACKUP_CORRUPT"
    PRIVILEGE_REQUIRED = "PRIVILEGE_REQUIRED"
    INVALID_PROFILE = "INVALID_PROFILE"


class TunerError(Exception):
    """Base class for all kerntune errors."""
    error_type: Optional[ErrorType] = None


class InvalidProfile(TunerError):
    """An unknown profile name was given."""
    error_type = ErrorType.INVALID_PROFILE

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown profile '{name}' (expected server, desktop or laptop)")


class ObservationMiss(TunerError):
    """A tunable could not be read or parsed."""
    error_type = ErrorType.OBSERVATION_MISS

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class ApplyFailure(TunerError):
    """A write to a tunable failed."""
    error_type = ErrorType.APPLY_FAILURE

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class BackupMissing(TunerError):
    """Reset was requested but no backup exists."""
    error_type = ErrorType.BACKUP_MISSING

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No backup found at {path}. Nothing to reset")


class BackupCorrupt(TunerError):
    """The backup document could not be parsed."""
    error_type = ErrorType.BACKUP_CORRUPT

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Backup at {path} is unreadable: {reason}")


class PrivilegeRequired(TunerError):
    """A mutating command was run without root."""
    error_type = ErrorType.PRIVILEGE_REQUIRED

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"'{command}' requires root privileges. Run with sudo.")
