"""
In-memory collaborators for tests.
"""

from typing import Dict, List, Optional, Tuple

from kerntune.tuning import ReloadError


class FakeCommandRunner:
    """Stands in for subprocess when the scanner queries systemctl."""

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], str]] = None):
        self.responses = responses or {}
        self.calls: List[List[str]] = []

    @classmethod
    def tlp(cls, enabled: str = "disabled", active: str = "inactive") -> "FakeCommandRunner":
        return cls({
            ("systemctl", "is-enabled", "tlp"): enabled,
            ("systemctl", "is-active", "tlp"): active,
        })

    def __call__(self, args: List[str]) -> str:
        self.calls.append(list(args))
        return self.responses.get(tuple(args), "")


class RecordingReloader:
    """Records reload requests; can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[str] = []

    def reload_sysctl(self) -> None:
        self.calls.append("sysctl")
        if self.fail:
            raise ReloadError("sysctl --system failed: exit status 1")

    def reload_udev(self) -> None:
        self.calls.append("udev")
        if self.fail:
            raise ReloadError("udevadm control --reload-rules failed: exit status 1")


class RecordingUI:
    """Records per-change progress callbacks from ApplyExecutor."""

    def __init__(self):
        self.events: List[tuple] = []

    def print_apply_start(self, change) -> None:
        self.events.append(("start", change.parameter))

    def print_apply_result(self, success: bool, error: Optional[str] = None) -> None:
        self.events.append(("result", success, error))
