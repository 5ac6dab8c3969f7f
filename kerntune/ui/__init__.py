"""
UI module - Rich console interface.

Provides:
- Profile and target display
- Change tables
- Apply/restore progress and summaries
"""

from .console import ConsoleUI

__all__ = [
    "ConsoleUI",
]
