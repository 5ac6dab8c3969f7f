"""
Test doubles for kerntune.

FakeSysfs builds a real directory tree under a temporary root that a
root-prefixed StateReader reads and writes like the live system.
"""

from .fake_sysfs import FakeSysfs, build_host
from .fakes import FakeCommandRunner, RecordingReloader, RecordingUI

__all__ = [
    'FakeSysfs',
    'build_host',
    'FakeCommandRunner',
    'RecordingReloader',
    'RecordingUI',
]
