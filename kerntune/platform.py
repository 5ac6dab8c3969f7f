"""
Host platform checks.
"""

import os

from .errors import PrivilegeRequired


def is_root() -> bool:
    """True when running with effective UID 0."""
    return os.geteuid() == 0


def require_root(command: str) -> None:
    """
    Abort a mutating command when not running as root.

    Raises:
        PrivilegeRequired: If the effective UID is not 0
    """
    if not is_root():
        raise PrivilegeRequired(command)
