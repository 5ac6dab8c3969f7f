"""
Target values per profile.

The table is closed: one TargetValues per (ProfileType, PowerState)
combination that matters. Lookups never touch the system.
"""

from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, Tuple

from .models import ProfileType, PowerState


@dataclass(frozen=True)
class TargetValues:
    """Every tunable the engine manages, at its target value."""

    # CPU
    governor: str
    epp: str
    turbo_on: bool

    # Memory
    swappiness: int
    dirty_bg_ratio: int
    dirty_ratio: int
    dirty_expire: int             # centisecs
    dirty_writeback: int          # centisecs
    vfs_cache_pressure: int
    thp_enabled: str              # always, madvise, never

    # Network
    tcp_congestion: str
    tcp_fastopen: int
    tcp_mtu_probing: int
    rmem_max: int                 # bytes
    wmem_max: int                 # bytes
    tcp_rmem: Tuple[int, int, int]  # min default max
    tcp_wmem: Tuple[int, int, int]

    # Storage
    sched_nvme: str
    sched_ssd: str
    sched_hdd: str
    read_ahead_kb: int

    # Power
    skip_if_tlp: bool

    def io_scheduler(self, disk_type: str) -> str:
        """Scheduler for a device class; unknown classes use the HDD column."""
        if disk_type == "nvme":
            return self.sched_nvme
        if disk_type == "ssd":
            return self.sched_ssd
        return self.sched_hdd

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


MB = 1024 * 1024

SERVER = TargetValues(
    governor="performance",
    epp="performance",
    turbo_on=True,
    swappiness=10,
    dirty_bg_ratio=1,
    dirty_ratio=5,
    dirty_expire=500,
    dirty_writeback=100,
    vfs_cache_pressure=50,
    thp_enabled="always",
    tcp_congestion="bbr",
    tcp_fastopen=3,
    tcp_mtu_probing=1,
    rmem_max=256 * MB,
    wmem_max=256 * MB,
    tcp_rmem=(4096, 1048576, 256 * MB),
    tcp_wmem=(4096, 1048576, 256 * MB),
    sched_nvme="none",
    sched_ssd="kyber",
    sched_hdd="bfq",
    read_ahead_kb=256,
    skip_if_tlp=False,
)

DESKTOP = TargetValues(
    governor="performance",
    epp="balance_performance",
    turbo_on=True,
    swappiness=10,
    dirty_bg_ratio=10,
    dirty_ratio=20,
    dirty_expire=3000,
    dirty_writeback=500,
    vfs_cache_pressure=100,
    thp_enabled="madvise",
    tcp_congestion="bbr",
    tcp_fastopen=3,
    tcp_mtu_probing=1,
    rmem_max=64 * MB,
    wmem_max=64 * MB,
    tcp_rmem=(4096, 131072, 64 * MB),
    tcp_wmem=(4096, 131072, 64 * MB),
    sched_nvme="none",
    sched_ssd="kyber",
    sched_hdd="bfq",
    read_ahead_kb=256,
    skip_if_tlp=False,
)

LAPTOP_AC = replace(
    DESKTOP,
    governor="schedutil",
    dirty_bg_ratio=5,
    dirty_ratio=15,
    sched_ssd="bfq",
    skip_if_tlp=True,
)

# Fewer wakeups and less turbo at the cost of RAM pressure.
LAPTOP_BATTERY = replace(
    LAPTOP_AC,
    governor="powersave",
    epp="balance_power",
    turbo_on=False,
    swappiness=30,
    dirty_expire=6000,
    dirty_writeback=1500,
    read_ahead_kb=128,
)

TARGET_TABLE: Dict[Tuple[ProfileType, PowerState], TargetValues] = {
    (ProfileType.SERVER, PowerState.AC): SERVER,
    (ProfileType.DESKTOP, PowerState.AC): DESKTOP,
    (ProfileType.LAPTOP, PowerState.AC): LAPTOP_AC,
    (ProfileType.LAPTOP, PowerState.BATTERY): LAPTOP_BATTERY,
}


def values_for(profile_type: ProfileType, power_state: PowerState = PowerState.AC) -> TargetValues:
    """
    Target values for a profile.

    Power state only selects between the laptop variants; servers and
    desktops are assumed to be on AC.
    """
    if profile_type != ProfileType.LAPTOP:
        power_state = PowerState.AC
    return TARGET_TABLE[(profile_type, power_state)]
