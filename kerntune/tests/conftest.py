"""Shared fixtures."""

import io

import pytest
from rich.console import Console

from kerntune.ui.console import ConsoleUI

from .mocks import FakeCommandRunner, build_host


@pytest.fixture
def host(tmp_path):
    """Untuned fake host with intel_pstate turbo and one NVMe disk."""
    return build_host(tmp_path / "root")


@pytest.fixture
def no_tlp():
    return FakeCommandRunner.tlp()


@pytest.fixture
def console_output():
    return io.StringIO()


@pytest.fixture
def ui(console_output):
    console = Console(file=console_output, width=200, no_color=True, highlight=False)
    return ConsoleUI(console=console)
