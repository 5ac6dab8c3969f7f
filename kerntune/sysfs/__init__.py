"""
sysfs/procfs access for kerntune.

Components:
- StateReader: typed reads and idempotent writes under a configurable root
- is_system_battery: laptop battery vs. peripheral battery
- TurboSurface: the inverted/direct turbo boost node, resolved once per run
- paths: well-known tunable locations
"""

from .reader import StateReader
from .power import is_mains, is_system_battery
from .turbo import TurboSurface, TurboEncoding, resolve_surface
from . import paths

__all__ = [
    "StateReader",
    "is_mains",
    "is_system_battery",
    "TurboSurface",
    "TurboEncoding",
    "resolve_surface",
    "paths",
]
