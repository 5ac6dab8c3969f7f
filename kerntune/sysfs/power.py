"""
Power supply classification.

HID peripherals (wireless mice, keyboards, headsets) register batteries
under power_supply too. They carry ``scope=Device`` and must not turn a
desktop into a laptop.
"""

from ..errors import ObservationMiss
from . import paths
from .reader import StateReader

SYSTEM_BATTERY_PREFIX = "BAT"
DEVICE_SCOPE = "device"


def supply_attr(reader: StateReader, name: str, attr: str) -> str:
    """Lower-cased attribute of a supply, empty when unreadable."""
    try:
        return reader.read_string(f"{paths.POWER_SUPPLY_BASE}/{name}/{attr}").lower()
    except ObservationMiss:
        return ""


def is_system_battery(reader: StateReader, name: str) -> bool:
    """
    True for a battery that powers the machine itself.

    ``BAT*`` supplies always count. Any other supply counts only when its
    type is Battery and its scope is not Device.
    """
    if name.startswith(SYSTEM_BATTERY_PREFIX):
        return True
    if supply_attr(reader, name, "type") != "battery":
        return False
    return supply_attr(reader, name, "scope") != DEVICE_SCOPE


def is_mains(reader: StateReader, name: str) -> bool:
    return name.startswith(("AC", "ADP")) or supply_attr(reader, name, "type") == "mains"
