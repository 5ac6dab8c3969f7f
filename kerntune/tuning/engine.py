"""
ReconciliationEngine - diffs a SystemSnapshot against TargetValues.

Output order is fixed: CPU, memory, storage (per device), network, and
within each group the order tunables are declared below. A change is
emitted only when the live value was observed and differs from the target,
so running the engine against an already-tuned system yields nothing.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, List, Optional

from ..discovery.models import CPUState, DiskState, SystemSnapshot
from ..profile.values import TargetValues
from ..sysfs import StateReader, paths
from .changes import Change, ChangeSet, Subsystem, SuppressedSubsystem

logger = logging.getLogger(__name__)


class ValueKind:
    INT = "int"
    STR = "str"
    TRIPLET = "triplet"


@dataclass(frozen=True)
class TunableSpec:
    """
    A scalar tunable backed by a single node.

    ``attr`` names both the snapshot field (inside ``section``) and the
    TargetValues field.
    """
    subsystem: Subsystem
    parameter: str
    section: str
    attr: str
    path: str
    kind: str = ValueKind.INT


MEMORY_TUNABLES = [
    TunableSpec(Subsystem.MEMORY, "Swappiness", "memory", "swappiness", paths.VM_SWAPPINESS),
    TunableSpec(Subsystem.MEMORY, "Dirty BG Ratio", "memory", "dirty_bg_ratio", paths.VM_DIRTY_BG_RATIO),
    TunableSpec(Subsystem.MEMORY, "Dirty Ratio", "memory", "dirty_ratio", paths.VM_DIRTY_RATIO),
    TunableSpec(Subsystem.MEMORY, "Dirty Expire", "memory", "dirty_expire", paths.VM_DIRTY_EXPIRE),
    TunableSpec(Subsystem.MEMORY, "Dirty Writeback", "memory", "dirty_writeback", paths.VM_DIRTY_WRITEBACK),
    TunableSpec(Subsystem.MEMORY, "VFS Cache Pressure", "memory", "vfs_cache_pressure", paths.VM_VFS_CACHE_PRESSURE),
    TunableSpec(Subsystem.MEMORY, "THP", "memory", "thp_enabled", paths.THP_ENABLED, ValueKind.STR),
]

NETWORK_TUNABLES = [
    TunableSpec(Subsystem.NETWORK, "TCP Congestion", "network", "tcp_congestion", paths.TCP_CONGESTION, ValueKind.STR),
    TunableSpec(Subsystem.NETWORK, "TCP Fast Open", "network", "tcp_fastopen", paths.TCP_FASTOPEN),
    TunableSpec(Subsystem.NETWORK, "TCP MTU Probing", "network", "tcp_mtu_probing", paths.TCP_MTU_PROBING),
    TunableSpec(Subsystem.NETWORK, "Recv Buffer Max", "network", "rmem_max", paths.NET_CORE_RMEM_MAX),
    TunableSpec(Subsystem.NETWORK, "Send Buffer Max", "network", "wmem_max", paths.NET_CORE_WMEM_MAX),
    TunableSpec(Subsystem.NETWORK, "TCP Rmem", "network", "tcp_rmem", paths.TCP_RMEM, ValueKind.TRIPLET),
    TunableSpec(Subsystem.NETWORK, "TCP Wmem", "network", "tcp_wmem", paths.TCP_WMEM, ValueKind.TRIPLET),
]


def format_value(value: Any, kind: str) -> str:
    """Render a normalized value in the form the node accepts."""
    if kind == ValueKind.TRIPLET:
        return " ".join(str(int(v)) for v in value)
    if kind == ValueKind.INT:
        return str(int(value))
    return str(value)


def normalize(value: Any, kind: str) -> Any:
    if kind == ValueKind.TRIPLET:
        return tuple(int(v) for v in value)
    if kind == ValueKind.INT:
        return int(value)
    return str(value).strip()


class ReconciliationEngine:
    """
    Computes the changes needed to move the system to a target.

    Usage:
        engine = ReconciliationEngine(StateReader())
        change_set = engine.compute_changes(snapshot, values_for(ProfileType.SERVER))
    """

    def __init__(self, writer: StateReader):
        """
        Args:
            writer: Used by the apply action of every emitted change
        """
        self.writer = writer

    def compute_changes(self, snapshot: SystemSnapshot, target: TargetValues) -> ChangeSet:
        """
        Diff the snapshot against the target.

        Args:
            snapshot: Observed system state
            target: Values for the selected profile

        Returns:
            ChangeSet with ordered changes and any suppressed subsystems
        """
        result = ChangeSet()

        tlp = snapshot.power.tlp
        if target.skip_if_tlp and tlp.enabled:
            result.suppressed.append(SuppressedSubsystem(
                Subsystem.CPU,
                "TLP is enabled. Skipping power-related CPU tuning.",
            ))
        else:
            result.changes.extend(self._cpu_changes(snapshot.cpu, target))

        result.changes.extend(self._scalar_changes(snapshot, target, MEMORY_TUNABLES))
        for disk in snapshot.storage.disks:
            result.changes.extend(self._disk_changes(disk, target))
        result.changes.extend(self._scalar_changes(snapshot, target, NETWORK_TUNABLES))

        logger.debug(
            "computed %d changes (%d subsystems suppressed)",
            len(result.changes), len(result.suppressed),
        )
        return result

    # =========================================================================
    # CPU
    # =========================================================================

    def _cpu_changes(self, cpu: CPUState, target: TargetValues) -> List[Change]:
        changes = []

        if cpu.governor is not None and cpu.governor != target.governor:
            changes.append(Change(
                subsystem=Subsystem.CPU,
                parameter="CPU Governor",
                old_value=cpu.governor,
                new_value=target.governor,
                path=paths.CPU_GOVERNOR,
                apply=partial(self.writer.write_all_cpus, paths.ATTR_GOVERNOR, target.governor),
            ))

        if cpu.epp is not None and cpu.epp != target.epp:
            changes.append(Change(
                subsystem=Subsystem.CPU,
                parameter="Energy Perf Pref",
                old_value=cpu.epp,
                new_value=target.epp,
                path=paths.CPU_EPP,
                apply=partial(self.writer.write_all_cpus, paths.ATTR_EPP, target.epp),
            ))

        turbo = self._turbo_change(cpu, target)
        if turbo is not None:
            changes.append(turbo)

        return changes

    def _turbo_change(self, cpu: CPUState, target: TargetValues) -> Optional[Change]:
        """Compare on "turbo enabled", write in the surface's own encoding."""
        enabled = cpu.turbo_enabled
        if enabled is None or enabled == target.turbo_on:
            return None

        surface = cpu.turbo_surface
        new_raw = surface.encode(target.turbo_on)
        return Change(
            subsystem=Subsystem.CPU,
            parameter=f"Turbo Boost ({surface.label})",
            old_value=str(cpu.turbo_raw),
            new_value=new_raw,
            path=surface.path,
            apply=partial(self.writer.write_string, surface.path, new_raw),
        )

    # =========================================================================
    # Scalar sysctl/sysfs tunables
    # =========================================================================

    def _scalar_changes(
        self,
        snapshot: SystemSnapshot,
        target: TargetValues,
        specs: List[TunableSpec],
    ) -> List[Change]:
        changes = []

        for spec in specs:
            current = getattr(getattr(snapshot, spec.section), spec.attr)
            if current is None:
                continue

            wanted = getattr(target, spec.attr)
            if normalize(current, spec.kind) == normalize(wanted, spec.kind):
                continue

            new_value = format_value(wanted, spec.kind)
            changes.append(Change(
                subsystem=spec.subsystem,
                parameter=spec.parameter,
                old_value=format_value(current, spec.kind),
                new_value=new_value,
                path=spec.path,
                apply=partial(self.writer.write_string, spec.path, new_value),
            ))

        return changes

    # =========================================================================
    # Storage
    # =========================================================================

    def _disk_changes(self, disk: DiskState, target: TargetValues) -> List[Change]:
        changes = []

        recommended = target.io_scheduler(disk.type)
        if disk.scheduler is not None and disk.scheduler != recommended:
            path = paths.block_queue_path(disk.name, "scheduler")
            changes.append(Change(
                subsystem=Subsystem.STORAGE,
                parameter=f"{disk.name} scheduler",
                old_value=disk.scheduler,
                new_value=recommended,
                path=path,
                apply=partial(self.writer.write_string, path, recommended),
            ))

        if (target.read_ahead_kb > 0 and disk.read_ahead_kb is not None
                and disk.read_ahead_kb != target.read_ahead_kb):
            path = paths.block_queue_path(disk.name, "read_ahead_kb")
            changes.append(Change(
                subsystem=Subsystem.STORAGE,
                parameter=f"{disk.name} read_ahead_kb",
                old_value=str(disk.read_ahead_kb),
                new_value=str(target.read_ahead_kb),
                path=path,
                apply=partial(self.writer.write_int, path, target.read_ahead_kb),
            ))

        return changes
