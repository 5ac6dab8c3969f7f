"""
SystemSnapshot - the live values the reconciliation engine diffs against.

Every tunable field is Optional: None means "not observed" (missing node,
permission denied, unparseable). A zero is a real observed zero.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..sysfs.turbo import TurboSurface


@dataclass
class CPUState:
    """CPU frequency scaling state."""
    governor: Optional[str] = None
    epp: Optional[str] = None
    driver: Optional[str] = None
    available_governors: List[str] = field(default_factory=list)

    # Turbo: surface resolved once, raw value as read from it
    turbo_surface: Optional[TurboSurface] = None
    turbo_raw: Optional[int] = None

    @property
    def turbo_enabled(self) -> Optional[bool]:
        if self.turbo_surface is None or self.turbo_raw is None:
            return None
        return self.turbo_surface.decode(self.turbo_raw)


@dataclass
class MemoryState:
    """VM tunables."""
    swappiness: Optional[int] = None
    dirty_bg_ratio: Optional[int] = None
    dirty_ratio: Optional[int] = None
    dirty_expire: Optional[int] = None
    dirty_writeback: Optional[int] = None
    vfs_cache_pressure: Optional[int] = None
    thp_enabled: Optional[str] = None


@dataclass
class DiskState:
    """One block device."""
    name: str
    type: str                              # nvme, ssd, hdd
    scheduler: Optional[str] = None
    available_schedulers: List[str] = field(default_factory=list)
    read_ahead_kb: Optional[int] = None
    rotational: Optional[bool] = None


@dataclass
class StorageState:
    disks: List[DiskState] = field(default_factory=list)


@dataclass
class NetworkState:
    """TCP/IP stack tunables."""
    tcp_congestion: Optional[str] = None
    available_congestion: List[str] = field(default_factory=list)
    tcp_fastopen: Optional[int] = None
    tcp_mtu_probing: Optional[int] = None
    rmem_max: Optional[int] = None
    wmem_max: Optional[int] = None
    tcp_rmem: Optional[Tuple[int, ...]] = None
    tcp_wmem: Optional[Tuple[int, ...]] = None


@dataclass
class DaemonStatus:
    """A power-management daemon as seen by systemd."""
    name: str
    installed: bool = False
    enabled: bool = False
    active: bool = False


@dataclass
class PowerInfo:
    has_battery: bool = False
    on_ac: bool = True
    tlp: DaemonStatus = field(default_factory=lambda: DaemonStatus("tlp"))


@dataclass
class SystemSnapshot:
    """Everything the engine needs to compute changes."""
    cpu: CPUState = field(default_factory=CPUState)
    memory: MemoryState = field(default_factory=MemoryState)
    storage: StorageState = field(default_factory=StorageState)
    network: NetworkState = field(default_factory=NetworkState)
    power: PowerInfo = field(default_factory=PowerInfo)
