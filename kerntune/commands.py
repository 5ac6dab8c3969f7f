"""
Command flows for kerntune.

Provides:
- profile - Show the detected (or selected) profile and its targets
- suggest - Show the changes a profile would make, without writing
- apply   - Apply the changes now
- save    - Back up original values and persist the profile as drop-ins
- reset   - Restore the backup and remove the drop-ins
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

from .config import Config
from .discovery import SystemScanner, SystemSnapshot
from .platform import require_root
from .profile import Profile, ProfileClassifier, ProfileType, TargetValues
from .snapshot import BackupRecord, BackupRestore, BackupStore, DropinWriter, RestoreResult
from .sysfs import StateReader
from .tuning import (
    ApplyExecutor,
    ApplyReport,
    ChangeSet,
    ReconciliationEngine,
    ReloadConfig,
    ReloadError,
    SystemReloader,
)
from .ui.console import ConsoleUI

logger = logging.getLogger(__name__)


@dataclass
class Plan:
    """Everything computed before a flow decides whether to write."""
    profile: Profile
    explicit: bool
    target: TargetValues
    snapshot: SystemSnapshot
    changes: ChangeSet


class TunerCommands:
    """
    Runs the user-facing flows against one host.

    Collaborators default to the live system as described by ``config``;
    tests pass their own.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        ui: Optional[ConsoleUI] = None,
        reader: Optional[StateReader] = None,
        classifier: Optional[ProfileClassifier] = None,
        scanner: Optional[SystemScanner] = None,
        store: Optional[BackupStore] = None,
        dropins: Optional[DropinWriter] = None,
        reloader: Optional[SystemReloader] = None,
        root_check: Callable[[str], None] = require_root,
    ):
        self.config = config or Config()
        self.ui = ui or ConsoleUI(quiet=self.config.output.quiet, color=self.config.output.color)

        paths = self.config.paths
        self.reader = reader or StateReader(paths.sysfs_root)
        self.classifier = classifier or ProfileClassifier(self.reader)
        self.scanner = scanner or SystemScanner(self.reader)
        self.store = store or BackupStore(Path(paths.backup_file))
        self.dropins = dropins or DropinWriter(Path(paths.sysctl_dropin), Path(paths.udev_rules))
        self.reloader = reloader or SystemReloader(ReloadConfig(
            enabled=self.config.reload.enabled,
            timeout=self.config.reload.timeout,
        ))
        self.root_check = root_check

        self.engine = ReconciliationEngine(self.reader)

    # =========================================================================
    # Shared steps
    # =========================================================================

    def resolve_profile(self, profile_name: Optional[str] = None) -> Tuple[Profile, bool]:
        """
        Explicit profile if one was named, otherwise classify the host.

        Raises:
            InvalidProfile: If profile_name is not a known profile
        """
        if profile_name:
            return self.classifier.for_type(ProfileType.parse(profile_name)), True
        return self.classifier.classify(), False

    def plan(self, profile_name: Optional[str] = None) -> Plan:
        """Classify, scan and reconcile."""
        profile, explicit = self.resolve_profile(profile_name)
        target = self.classifier.target_for(profile)
        snapshot = self.scanner.scan()
        changes = self.engine.compute_changes(snapshot, target)
        logger.info("profile %s: %d changes", profile.name, len(changes))
        return Plan(profile, explicit, target, snapshot, changes)

    # =========================================================================
    # Flows
    # =========================================================================

    def profile(self, profile_name: Optional[str] = None) -> Profile:
        """Show the profile, the facts it was derived from and its targets."""
        profile, explicit = self.resolve_profile(profile_name)
        snapshot = self.scanner.scan()
        self.ui.print_profile(profile, snapshot, self.classifier.target_for(profile), explicit=explicit)
        return profile

    def suggest(self, profile_name: Optional[str] = None) -> ChangeSet:
        """Show what apply would change. Needs no privileges and writes nothing."""
        plan = self.plan(profile_name)
        self.ui.print_profile(plan.profile, explicit=plan.explicit)
        self.ui.print_changes(plan.changes)
        return plan.changes

    def apply(self, profile_name: Optional[str] = None, auto: Optional[bool] = None) -> Optional[ApplyReport]:
        """
        Apply the computed changes to the running system.

        Returns:
            ApplyReport, or None when nothing was applied
        """
        self.root_check("apply")
        if auto is None:
            auto = self.config.apply.auto

        plan = self.plan(profile_name)
        self.ui.print_profile(plan.profile, explicit=plan.explicit)
        self.ui.print_changes(plan.changes)

        if not plan.changes:
            return None

        if not auto and not self.ui.confirm(f"Apply {len(plan.changes)} changes?", default=False):
            self.ui.print_warning("Aborted. No changes applied.")
            return None

        self.ui.print()
        report = ApplyExecutor(self.ui).apply(plan.changes.changes, auto=auto)
        if auto:
            # no per-change progress was shown
            for outcome in report.failures:
                self.ui.print_warning(f"{outcome.change.parameter} ({outcome.change.path}): {outcome.error}")
        self.ui.print_apply_summary(report)
        return report

    def save(self, profile_name: Optional[str] = None) -> BackupRecord:
        """
        Persist a profile so it survives reboots.

        The original values of every tunable the profile changes are backed
        up first; reload failures are reported as warnings.
        """
        self.root_check("save")

        plan = self.plan(profile_name)
        self.ui.print(f"Saving tuning for profile: [bold]{plan.profile.name}[/]")
        for warning in plan.changes.warnings:
            self.ui.print_warning(warning)

        record = self.store.save(plan.profile.name, plan.changes.backup_values())
        self.ui.print(f"  Backup saved to {self.store.path}")

        written = self.dropins.write_sysctl(plan.target, plan.profile.name)
        self.ui.print(f"  Written {written}")
        written = self.dropins.write_udev(plan.target, plan.profile.name)
        self.ui.print(f"  Written {written}")

        self._reload()
        self.ui.print_success("Tuning persisted successfully.")
        return record

    def reset(self) -> RestoreResult:
        """
        Restore backed-up values and remove the persisted drop-ins.

        Raises:
            BackupMissing: No backup exists; nothing is written
            BackupCorrupt: The backup cannot be parsed; nothing is written
        """
        self.root_check("reset")

        record = self.store.load()
        self.ui.print_backup_info(record)

        result = BackupRestore(self.reader).restore(record)
        self.ui.print_restore_result(result)
        self.ui.print()

        for label, remove, path in (
            ("sysctl config", self.dropins.remove_sysctl, self.dropins.sysctl_path),
            ("udev rules", self.dropins.remove_udev, self.dropins.udev_path),
        ):
            try:
                remove()
            except OSError as e:
                self.ui.print_warning(f"failed to remove {label}: {e}")
            else:
                self.ui.print(f"  Removed {path}")

        self._reload()

        try:
            self.store.remove()
        except OSError as e:
            self.ui.print_warning(f"failed to remove backup: {e}")

        self.ui.print_restore_summary(result)
        self.ui.print_success("Reset complete.")
        return result

    def _reload(self) -> None:
        for label, reload in (("sysctl", self.reloader.reload_sysctl), ("udev", self.reloader.reload_udev)):
            try:
                reload()
            except ReloadError as e:
                logger.warning("%s reload failed: %s", label, e)
                self.ui.print_warning(f"failed to reload {label}: {e}")
