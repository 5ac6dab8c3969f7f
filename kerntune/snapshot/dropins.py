"""
Persisted drop-ins - sysctl.d and udev rules that reapply a profile at boot.
"""

import logging
from pathlib import Path
from typing import List

from ..profile.values import TargetValues
from ..sysfs import paths

logger = logging.getLogger(__name__)

DEFAULT_SYSCTL_DROPIN = Path("/etc/sysctl.d/99-kerntune.conf")
DEFAULT_UDEV_RULES = Path("/etc/udev/rules.d/99-kerntune-disk.rules")

HEADER = "# Generated by kerntune ({profile}). Remove with 'kerntune reset'."

# (sysctl path, TargetValues field)
SYSCTL_TUNABLES = [
    (paths.VM_SWAPPINESS, "swappiness"),
    (paths.VM_DIRTY_BG_RATIO, "dirty_bg_ratio"),
    (paths.VM_DIRTY_RATIO, "dirty_ratio"),
    (paths.VM_DIRTY_EXPIRE, "dirty_expire"),
    (paths.VM_DIRTY_WRITEBACK, "dirty_writeback"),
    (paths.VM_VFS_CACHE_PRESSURE, "vfs_cache_pressure"),
    (paths.TCP_CONGESTION, "tcp_congestion"),
    (paths.TCP_FASTOPEN, "tcp_fastopen"),
    (paths.TCP_MTU_PROBING, "tcp_mtu_probing"),
    (paths.NET_CORE_RMEM_MAX, "rmem_max"),
    (paths.NET_CORE_WMEM_MAX, "wmem_max"),
    (paths.TCP_RMEM, "tcp_rmem"),
    (paths.TCP_WMEM, "tcp_wmem"),
]


def _sysctl_value(value) -> str:
    if isinstance(value, tuple):
        return " ".join(str(v) for v in value)
    return str(value)


def render_sysctl(target: TargetValues, profile_name: str) -> str:
    """
    Render the sysctl.d drop-in for a target.

    Only /proc/sys tunables are included; THP lives in sysfs and has no
    sysctl key.
    """
    lines = [HEADER.format(profile=profile_name)]
    for path, attr in SYSCTL_TUNABLES:
        lines.append(f"{paths.sysctl_key(path)} = {_sysctl_value(getattr(target, attr))}")
    return "\n".join(lines) + "\n"


def render_udev(target: TargetValues, profile_name: str) -> str:
    """
    Render udev rules that set scheduler and read-ahead per device class.

    NVMe devices match by name; SATA/SCSI devices are split on the
    rotational flag.
    """
    read_ahead = ""
    if target.read_ahead_kb > 0:
        read_ahead = f', ATTR{{queue/read_ahead_kb}}="{target.read_ahead_kb}"'

    rules: List[str] = [
        HEADER.format(profile=profile_name),
        'ACTION=="add|change", KERNEL=="nvme[0-9]*n[0-9]*", '
        f'ATTR{{queue/scheduler}}="{target.sched_nvme}"{read_ahead}',
        'ACTION=="add|change", KERNEL=="sd[a-z]*", ATTR{queue/rotational}=="0", '
        f'ATTR{{queue/scheduler}}="{target.sched_ssd}"{read_ahead}',
        'ACTION=="add|change", KERNEL=="sd[a-z]*", ATTR{queue/rotational}=="1", '
        f'ATTR{{queue/scheduler}}="{target.sched_hdd}"{read_ahead}',
    ]
    return "\n".join(rules) + "\n"


class DropinWriter:
    """Writes and removes the two drop-in files."""

    def __init__(
        self,
        sysctl_path: Path = DEFAULT_SYSCTL_DROPIN,
        udev_path: Path = DEFAULT_UDEV_RULES,
    ):
        self.sysctl_path = Path(sysctl_path)
        self.udev_path = Path(udev_path)

    def write_sysctl(self, target: TargetValues, profile_name: str) -> Path:
        self._write(self.sysctl_path, render_sysctl(target, profile_name))
        return self.sysctl_path

    def write_udev(self, target: TargetValues, profile_name: str) -> Path:
        self._write(self.udev_path, render_udev(target, profile_name))
        return self.udev_path

    def remove_sysctl(self) -> None:
        """Remove the sysctl drop-in. A missing file is not an error."""
        self.sysctl_path.unlink(missing_ok=True)

    def remove_udev(self) -> None:
        """Remove the udev rules. A missing file is not an error."""
        self.udev_path.unlink(missing_ok=True)

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        logger.info("wrote %s", path)
