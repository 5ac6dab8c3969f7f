"""
ApplyExecutor - applies computed changes in order.

Every change is attempted exactly once, in the order given. A failed
write is recorded against its change and execution continues; there are
no retries because sysfs/procfs writes fail deterministically.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from .changes import Change

if TYPE_CHECKING:
    from ..ui.console import ConsoleUI

logger = logging.getLogger(__name__)


@dataclass
class ChangeOutcome:
    """Result of applying one change."""
    change: Change
    success: bool
    error: Optional[str] = None


@dataclass
class ApplyReport:
    """Per-change outcomes and the aggregate counts."""
    outcomes: List[ChangeOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)

    @property
    def counts(self) -> Tuple[int, int]:
        return self.succeeded, self.failed

    @property
    def failures(self) -> List[ChangeOutcome]:
        return [o for o in self.outcomes if not o.success]


class ApplyExecutor:
    """
    Runs the apply action of each change.

    Usage:
        executor = ApplyExecutor(ui=console)
        report = executor.apply(change_set.changes, auto=False)
        print(report.counts)
    """

    def __init__(self, ui: Optional["ConsoleUI"] = None):
        self.ui = ui

    def apply(self, changes: Iterable[Change], auto: bool = False) -> ApplyReport:
        """
        Apply changes sequentially.

        Args:
            changes: Changes in the order produced by the engine
            auto: Suppress per-change progress output

        Returns:
            ApplyReport with one outcome per change
        """
        report = ApplyReport()
        show_progress = not auto and self.ui is not None

        for change in changes:
            if show_progress:
                self.ui.print_apply_start(change)

            try:
                change.apply()
            except Exception as e:
                logger.warning("%s: %s -> %s failed: %s",
                               change.parameter, change.old_value, change.new_value, e)
                outcome = ChangeOutcome(change, success=False, error=str(e))
            else:
                logger.info("%s: %s -> %s", change.parameter, change.old_value, change.new_value)
                outcome = ChangeOutcome(change, success=True)

            report.outcomes.append(outcome)
            if show_progress:
                self.ui.print_apply_result(outcome.success, outcome.error)

        return report
