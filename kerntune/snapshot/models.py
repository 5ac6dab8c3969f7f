"""
Data models for the backup/restore system.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any
from pathlib import Path
import json


def rfc3339_now() -> str:
    """Local time with UTC offset, second precision."""
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


@dataclass
class BackupRecord:
    """Original tunable values captured before tuning was persisted."""

    timestamp: str                  # RFC3339
    profile: str                    # profile name at save time
    values: Dict[str, str] = field(default_factory=dict)  # path -> original value

    @classmethod
    def create(cls, profile: str, values: Dict[str, str]) -> 'BackupRecord':
        """Create a new record stamped with the current time."""
        return cls(timestamp=rfc3339_now(), profile=profile, values=dict(values))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackupRecord':
        """
        Create from dictionary (JSON deserialization).

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("backup document is not an object")

        timestamp = data.get("timestamp")
        profile = data.get("profile")
        values = data.get("values")

        if not isinstance(timestamp, str) or not isinstance(profile, str):
            raise ValueError("timestamp and profile must be strings")
        if not isinstance(values, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in values.items()
        ):
            raise ValueError("values must map paths to strings")

        return cls(timestamp=timestamp, profile=profile, values=dict(values))

    def save(self, path: Path) -> None:
        """Save record to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> 'BackupRecord':
        """Load record from JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))


@dataclass
class PathRestore:
    """Outcome for one restored path."""
    path: str
    value: str
    success: bool
    error: Optional[str] = None


@dataclass
class RestoreResult:
    """Result of replaying a backup."""
    restored: List[PathRestore] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)   # paths that no longer exist

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.restored if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.restored if not r.success)

    @property
    def success(self) -> bool:
        return self.failed == 0
