"""
Well-known sysfs/procfs locations.

All paths are absolute as seen on a live host; StateReader maps them
under its root so tests can point it at a fake tree.
"""

# CPU
CPU_BASE = "/sys/devices/system/cpu"
CPU_GOVERNOR = "/sys/devices/system/cpu/cpu0/cpufreq/scaling_governor"
CPU_AVAIL_GOVERNORS = "/sys/devices/system/cpu/cpu0/cpufreq/scaling_available_governors"
CPU_DRIVER = "/sys/devices/system/cpu/cpu0/cpufreq/scaling_driver"
CPU_EPP = "/sys/devices/system/cpu/cpu0/cpufreq/energy_performance_preference"
CPU_BOOST = "/sys/devices/system/cpu/cpufreq/boost"
INTEL_NO_TURBO = "/sys/devices/system/cpu/intel_pstate/no_turbo"

# Per-CPU cpufreq attribute names
ATTR_GOVERNOR = "scaling_governor"
ATTR_EPP = "energy_performance_preference"

# Memory
VM_SWAPPINESS = "/proc/sys/vm/swappiness"
VM_DIRTY_BG_RATIO = "/proc/sys/vm/dirty_background_ratio"
VM_DIRTY_RATIO = "/proc/sys/vm/dirty_ratio"
VM_DIRTY_EXPIRE = "/proc/sys/vm/dirty_expire_centisecs"
VM_DIRTY_WRITEBACK = "/proc/sys/vm/dirty_writeback_centisecs"
VM_VFS_CACHE_PRESSURE = "/proc/sys/vm/vfs_cache_pressure"
THP_ENABLED = "/sys/kernel/mm/transparent_hugepage/enabled"

# Storage
BLOCK_BASE = "/sys/block"

# Network
TCP_CONGESTION = "/proc/sys/net/ipv4/tcp_congestion_control"
TCP_AVAIL_CONGESTION = "/proc/sys/net/ipv4/tcp_available_congestion_control"
TCP_FASTOPEN = "/proc/sys/net/ipv4/tcp_fastopen"
TCP_MTU_PROBING = "/proc/sys/net/ipv4/tcp_mtu_probing"
TCP_RMEM = "/proc/sys/net/ipv4/tcp_rmem"
TCP_WMEM = "/proc/sys/net/ipv4/tcp_wmem"
NET_CORE_RMEM_MAX = "/proc/sys/net/core/rmem_max"
NET_CORE_WMEM_MAX = "/proc/sys/net/core/wmem_max"

# Power / platform
POWER_SUPPLY_BASE = "/sys/class/power_supply"
CHASSIS_TYPE = "/sys/class/dmi/id/chassis_type"

PROC_SYS = "/proc/sys/"


def block_queue_path(device: str, attr: str) -> str:
    """Path of a block device queue attribute, e.g. ``sda``/``scheduler``."""
    return f"{BLOCK_BASE}/{device}/queue/{attr}"


def sysctl_key(path: str) -> str:
    """Dotted sysctl key for a /proc/sys path (``vm.swappiness``)."""
    if not path.startswith(PROC_SYS):
        raise ValueError(f"Not a /proc/sys path: {path}")
    return path[len(PROC_SYS):].replace("/", ".")


def per_cpu_attr(path: str) -> str:
    """
    Return the cpufreq attribute name if path is a cpu0 cpufreq node.

    Returns an empty string for any other path.
    """
    prefix = f"{CPU_BASE}/cpu0/cpufreq/"
    if path.startswith(prefix):
        return path[len(prefix):]
    return ""
