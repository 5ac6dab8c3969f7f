"""
Change records produced by reconciliation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List


class Subsystem(str, Enum):
    """Change groups, in the order they are emitted."""
    CPU = "cpu"
    MEMORY = "memory"
    STORAGE = "storage"
    NETWORK = "network"


@dataclass(frozen=True)
class Change:
    """
    One tunable that differs from its target.

    ``old_value`` is exactly what was observed, in the encoding the node
    accepts, so it can be written back on restore.
    """
    subsystem: Subsystem
    parameter: str
    old_value: str
    new_value: str
    path: str
    apply: Callable[[], None] = field(compare=False, repr=False)


@dataclass(frozen=True)
class SuppressedSubsystem:
    """A subsystem left untouched on purpose, with the reason for the user."""
    subsystem: Subsystem
    reason: str


@dataclass
class ChangeSet:
    """Result of reconciliation: ordered changes plus suppression notices."""
    changes: List[Change] = field(default_factory=list)
    suppressed: List[SuppressedSubsystem] = field(default_factory=list)

    def __iter__(self) -> Iterator[Change]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __bool__(self) -> bool:
        return bool(self.changes)

    def by_subsystem(self, subsystem: Subsystem) -> List[Change]:
        return [c for c in self.changes if c.subsystem == subsystem]

    def backup_values(self) -> Dict[str, str]:
        """path -> original value for every change."""
        return {c.path: c.old_value for c in self.changes if c.path}

    @property
    def warnings(self) -> List[str]:
        return [s.reason for s in self.suppressed]
