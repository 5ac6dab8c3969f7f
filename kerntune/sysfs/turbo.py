"""
Turbo boost control surfaces.

intel_pstate exposes an inverted flag (no_turbo=1 means turbo off), while
acpi-cpufreq and amd-pstate expose a direct one (boost=1 means turbo on).
The surface is resolved once per scan and carried in the snapshot.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import paths


class TurboEncoding(str, Enum):
    INVERTED = "inverted"
    DIRECT = "direct"


@dataclass(frozen=True)
class TurboSurface:
    """One turbo control node and how it encodes "enabled"."""
    encoding: TurboEncoding
    path: str

    @classmethod
    def inverted(cls, path: str = paths.INTEL_NO_TURBO) -> "TurboSurface":
        return cls(TurboEncoding.INVERTED, path)

    @classmethod
    def direct(cls, path: str = paths.CPU_BOOST) -> "TurboSurface":
        return cls(TurboEncoding.DIRECT, path)

    @property
    def label(self) -> str:
        return "no_turbo" if self.encoding == TurboEncoding.INVERTED else "boost"

    def decode(self, raw: int) -> bool:
        """Raw node value -> turbo enabled."""
        if self.encoding == TurboEncoding.INVERTED:
            return raw == 0
        return raw == 1

    def encode(self, enabled: bool) -> str:
        """Turbo enabled -> raw node value."""
        if self.encoding == TurboEncoding.INVERTED:
            return "0" if enabled else "1"
        return "1" if enabled else "0"


def resolve_surface(reader) -> Optional[TurboSurface]:
    """
    Pick the turbo surface present on this host.

    The inverted intel_pstate node wins when both exist.
    """
    if reader.exists(paths.INTEL_NO_TURBO):
        return TurboSurface.inverted()
    if reader.exists(paths.CPU_BOOST):
        return TurboSurface.direct()
    return None
