"""
Profile selection for kerntune.

Components:
- ProfileClassifier: battery / DMI / headless heuristics
- TargetValues: the per-profile target table (pure lookup)
"""

from .models import Profile, ProfileType, PowerState
from .values import TargetValues, TARGET_TABLE, values_for
from .classifier import ProfileClassifier

__all__ = [
    "Profile",
    "ProfileType",
    "PowerState",
    "TargetValues",
    "TARGET_TABLE",
    "values_for",
    "ProfileClassifier",
]
