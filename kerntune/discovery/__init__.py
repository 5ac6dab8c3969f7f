"""
Discovery module - Gathers the live state of the host.

Components:
- SystemScanner: Reads CPU, memory, storage, network and power tunables
- SystemSnapshot: The observed values (None = not observed)
"""

from .models import (
    CPUState,
    MemoryState,
    DiskState,
    StorageState,
    NetworkState,
    DaemonStatus,
    PowerInfo,
    SystemSnapshot,
)
from .system import SystemScanner

__all__ = [
    "CPUState",
    "MemoryState",
    "DiskState",
    "StorageState",
    "NetworkState",
    "DaemonStatus",
    "PowerInfo",
    "SystemSnapshot",
    "SystemScanner",
]
