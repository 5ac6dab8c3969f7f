"""
Profile types and power states.
"""

from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidProfile


class ProfileType(str, Enum):
    """Machine class that selects a target table."""
    SERVER = "server"
    DESKTOP = "desktop"
    LAPTOP = "laptop"

    @classmethod
    def parse(cls, name: str) -> "ProfileType":
        """
        Parse a user-supplied profile name.

        Raises:
            InvalidProfile: If the name is not a known profile.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise InvalidProfile(name)


class PowerState(str, Enum):
    """Power source; only meaningful for laptops."""
    AC = "ac"
    BATTERY = "battery"


@dataclass(frozen=True)
class Profile:
    """A classified (or explicitly chosen) profile."""
    type: ProfileType
    power_state: PowerState = PowerState.AC

    @property
    def name(self) -> str:
        if self.type == ProfileType.LAPTOP:
            return f"{self.type.value}-{self.power_state.value}"
        return self.type.value
