"""
ProfileClassifier - decides which profile applies to this machine.

Signals are checked in strict priority order and the first hit wins:

1. Battery present          -> laptop
2. DMI chassis type         -> server or laptop
3. Headless + multi-user    -> server
4. Anything else            -> desktop

Battery is checked first because DMI data is often missing or bogus in
virtual machines. Every read failure counts as "signal absent", so
classification always returns a profile.
"""

import logging
import os
import subprocess
from typing import Callable, Mapping, Optional

from ..errors import ObservationMiss
from ..sysfs import StateReader, is_mains, is_system_battery, paths
from .models import Profile, ProfileType, PowerState
from .values import TargetValues, values_for

logger = logging.getLogger(__name__)

# 17 Main Server, 23 Rack Mount, 25 Multi-system, 28 Blade, 29 Blade Enclosure
SERVER_CHASSIS = frozenset({17, 23, 25, 28, 29})

# 8 Portable, 9 Laptop, 10 Notebook, 14 Sub Notebook, 31 Convertible, 32 Detachable
LAPTOP_CHASSIS = frozenset({8, 9, 10, 14, 31, 32})


def systemd_default_target() -> Optional[str]:
    """Output of ``systemctl get-default``, or None if it cannot be run."""
    try:
        result = subprocess.run(
            ["systemctl", "get-default"],
            capture_output=True, text=True, check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("systemctl get-default failed: %s", e)
        return None
    return result.stdout.strip()


class ProfileClassifier:
    """
    Classifies the running machine.

    Usage:
        classifier = ProfileClassifier(StateReader())
        profile = classifier.classify()
        target = classifier.target_for(profile)
    """

    def __init__(
        self,
        reader: StateReader,
        environ: Optional[Mapping[str, str]] = None,
        default_target: Optional[Callable[[], Optional[str]]] = None,
    ):
        """
        Args:
            reader: StateReader for power supply and DMI nodes
            environ: Environment to inspect for a display (default: os.environ)
            default_target: Returns the systemd default target
        """
        self.reader = reader
        self.environ = environ if environ is not None else os.environ
        self.default_target = default_target or systemd_default_target

    def classify(self) -> Profile:
        """Detect the profile and, for laptops, the current power state."""
        if self.has_battery():
            return Profile(ProfileType.LAPTOP, self.detect_power_state())

        chassis = self.chassis_type()
        if chassis in SERVER_CHASSIS:
            return Profile(ProfileType.SERVER)
        if chassis in LAPTOP_CHASSIS:
            return Profile(ProfileType.LAPTOP, self.detect_power_state())

        if not self.has_display() and self.is_multi_user_target():
            return Profile(ProfileType.SERVER)

        logger.debug("no profile signal matched, defaulting to desktop")
        return Profile(ProfileType.DESKTOP)

    def for_type(self, profile_type: ProfileType) -> Profile:
        """Profile for an explicitly chosen type; laptops still get a live power state."""
        if profile_type == ProfileType.LAPTOP:
            return Profile(profile_type, self.detect_power_state())
        return Profile(profile_type)

    @staticmethod
    def target_for(profile: Profile) -> TargetValues:
        return values_for(profile.type, profile.power_state)

    # =========================================================================
    # Signals
    # =========================================================================

    def _supplies(self):
        return self.reader.list_dir(paths.POWER_SUPPLY_BASE)

    def _is_battery(self, name: str) -> bool:
        return is_system_battery(self.reader, name)

    def _is_mains(self, name: str) -> bool:
        return is_mains(self.reader, name)

    def has_battery(self) -> bool:
        return any(self._is_battery(name) for name in self._supplies())

    def detect_power_state(self) -> PowerState:
        """
        AC unless a mains supply reports offline.

        Without any mains supply, a discharging battery means battery power.
        """
        supplies = self._supplies()
        mains = [name for name in supplies if self._is_mains(name)]

        if mains:
            for name in mains:
                try:
                    online = self.reader.read_int(f"{paths.POWER_SUPPLY_BASE}/{name}/online")
                except ObservationMiss:
                    continue
                if online == 0:
                    return PowerState.BATTERY
            return PowerState.AC

        for name in supplies:
            if not self._is_battery(name):
                continue
            try:
                status = self.reader.read_string(f"{paths.POWER_SUPPLY_BASE}/{name}/status")
            except ObservationMiss:
                continue
            if status == "Discharging":
                return PowerState.BATTERY

        return PowerState.AC

    def chassis_type(self) -> int:
        """DMI chassis code, 0 when unavailable."""
        try:
            return self.reader.read_int(paths.CHASSIS_TYPE)
        except ObservationMiss:
            return 0

    def has_display(self) -> bool:
        return bool(self.environ.get("DISPLAY") or self.environ.get("WAYLAND_DISPLAY"))

    def is_multi_user_target(self) -> bool:
        return self.default_target() == "multi-user.target"
