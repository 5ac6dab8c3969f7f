"""
SystemScanner - builds a SystemSnapshot from sysfs/procfs.

Each field is read independently; anything that cannot be read stays None
and is logged at debug level. Scanning never raises.
"""

import logging
import subprocess
from typing import Callable, List, Optional, Tuple

from ..errors import ObservationMiss
from ..sysfs import StateReader, is_system_battery, paths, resolve_surface
from .models import (
    CPUState,
    DaemonStatus,
    DiskState,
    MemoryState,
    NetworkState,
    PowerInfo,
    StorageState,
    SystemSnapshot,
)

logger = logging.getLogger(__name__)

# Block devices that are never tuned
SKIP_BLOCK_PREFIXES = ("loop", "ram", "zram", "dm-")


def run_command(args: List[str]) -> str:
    """Run a command and return its stripped stdout ("" if it cannot run)."""
    try:
        result = subprocess.run(args, capture_output=True, text=True)
    except OSError as e:
        logger.debug("%s: %s", args[0], e)
        return ""
    return result.stdout.strip()


def parse_triplet(value: str) -> Optional[Tuple[int, ...]]:
    """"4096\t131072  6291456" -> (4096, 131072, 6291456); None if malformed."""
    try:
        fields = tuple(int(f) for f in value.split())
    except ValueError:
        return None
    return fields if len(fields) == 3 else None


def classify_disk(name: str, rotational: Optional[bool]) -> str:
    if name.startswith("nvme"):
        return "nvme"
    if rotational:
        return "hdd"
    return "ssd"


class SystemScanner:
    """
    Scans CPU, memory, storage, network and power state.

    Usage:
        scanner = SystemScanner(StateReader())
        snapshot = scanner.scan()
    """

    def __init__(
        self,
        reader: StateReader,
        command_runner: Optional[Callable[[List[str]], str]] = None,
    ):
        self.reader = reader
        self.command_runner = command_runner or run_command

    def scan(self) -> SystemSnapshot:
        """Perform a full scan."""
        return SystemSnapshot(
            cpu=self._get_cpu_info(),
            memory=self._get_memory_info(),
            storage=self._get_storage_info(),
            network=self._get_network_info(),
            power=self._get_power_info(),
        )

    # =========================================================================
    # Observation helpers
    # =========================================================================

    def _string(self, path: str) -> Optional[str]:
        try:
            return self.reader.read_string(path)
        except ObservationMiss as e:
            logger.debug("%s", e)
            return None

    def _int(self, path: str) -> Optional[int]:
        try:
            return self.reader.read_int(path)
        except ObservationMiss as e:
            logger.debug("%s", e)
            return None

    def _bracketed(self, path: str) -> Optional[str]:
        try:
            return self.reader.read_bracketed(path)
        except ObservationMiss as e:
            logger.debug("%s", e)
            return None

    def _fields(self, path: str) -> List[str]:
        try:
            return [f.strip("[]") for f in self.reader.read_fields(path)]
        except ObservationMiss as e:
            logger.debug("%s", e)
            return []

    def _triplet(self, path: str) -> Optional[Tuple[int, ...]]:
        raw = self._string(path)
        if raw is None:
            return None
        parsed = parse_triplet(raw)
        if parsed is None:
            logger.debug("Cannot parse %s: %r", path, raw)
        return parsed

    # =========================================================================
    # Subsystems
    # =========================================================================

    def _get_cpu_info(self) -> CPUState:
        info = CPUState(
            governor=self._string(paths.CPU_GOVERNOR),
            epp=self._string(paths.CPU_EPP),
            driver=self._string(paths.CPU_DRIVER),
            available_governors=self._fields(paths.CPU_AVAIL_GOVERNORS),
        )

        surface = resolve_surface(self.reader)
        if surface is not None:
            info.turbo_surface = surface
            info.turbo_raw = self._int(surface.path)

        return info

    def _get_memory_info(self) -> MemoryState:
        return MemoryState(
            swappiness=self._int(paths.VM_SWAPPINESS),
            dirty_bg_ratio=self._int(paths.VM_DIRTY_BG_RATIO),
            dirty_ratio=self._int(paths.VM_DIRTY_RATIO),
            dirty_expire=self._int(paths.VM_DIRTY_EXPIRE),
            dirty_writeback=self._int(paths.VM_DIRTY_WRITEBACK),
            vfs_cache_pressure=self._int(paths.VM_VFS_CACHE_PRESSURE),
            thp_enabled=self._bracketed(paths.THP_ENABLED),
        )

    def _get_storage_info(self) -> StorageState:
        info = StorageState()

        for name in self.reader.list_dir(paths.BLOCK_BASE):
            if name.startswith(SKIP_BLOCK_PREFIXES):
                continue

            rotational = self._int(paths.block_queue_path(name, "rotational"))
            rotational = None if rotational is None else rotational == 1
            scheduler_path = paths.block_queue_path(name, "scheduler")

            info.disks.append(DiskState(
                name=name,
                type=classify_disk(name, rotational),
                scheduler=self._bracketed(scheduler_path),
                available_schedulers=self._fields(scheduler_path),
                read_ahead_kb=self._int(paths.block_queue_path(name, "read_ahead_kb")),
                rotational=rotational,
            ))

        return info

    def _get_network_info(self) -> NetworkState:
        return NetworkState(
            tcp_congestion=self._string(paths.TCP_CONGESTION),
            available_congestion=self._fields(paths.TCP_AVAIL_CONGESTION),
            tcp_fastopen=self._int(paths.TCP_FASTOPEN),
            tcp_mtu_probing=self._int(paths.TCP_MTU_PROBING),
            rmem_max=self._int(paths.NET_CORE_RMEM_MAX),
            wmem_max=self._int(paths.NET_CORE_WMEM_MAX),
            tcp_rmem=self._triplet(paths.TCP_RMEM),
            tcp_wmem=self._triplet(paths.TCP_WMEM),
        )

    def _get_power_info(self) -> PowerInfo:
        info = PowerInfo(tlp=self._get_daemon_status("tlp"))
        ac_seen = False
        battery_status = ""

        for name in self.reader.list_dir(paths.POWER_SUPPLY_BASE):
            base = f"{paths.POWER_SUPPLY_BASE}/{name}"
            ps_type = (self._string(f"{base}/type") or "").lower()

            if ps_type == "mains":
                ac_seen = True
                online = self._int(f"{base}/online")
                if online is not None:
                    info.on_ac = online == 1
            elif is_system_battery(self.reader, name):
                info.has_battery = True
                if not battery_status:
                    battery_status = self._string(f"{base}/status") or ""

        if info.has_battery and not ac_seen:
            info.on_ac = battery_status != "Discharging"

        return info

    def _get_daemon_status(self, name: str) -> DaemonStatus:
        """Query systemd for a unit's enablement and activity."""
        enabled_state = self.command_runner(["systemctl", "is-enabled", name])
        active_state = self.command_runner(["systemctl", "is-active", name])

        return DaemonStatus(
            name=name,
            installed=bool(enabled_state) and enabled_state != "not-found",
            enabled=enabled_state == "enabled",
            active=active_state == "active",
        )
