"""Tests for ReconciliationEngine."""

from dataclasses import replace

import pytest

from kerntune.discovery import SystemScanner
from kerntune.profile.values import DESKTOP, LAPTOP_AC, LAPTOP_BATTERY, SERVER
from kerntune.sysfs import paths
from kerntune.tuning import ApplyExecutor, ReconciliationEngine, Subsystem

from .mocks import FakeCommandRunner, build_host

SUBSYSTEM_ORDER = [Subsystem.CPU, Subsystem.MEMORY, Subsystem.STORAGE, Subsystem.NETWORK]


def compute(fake, target, runner=None):
    reader = fake.reader()
    snapshot = SystemScanner(reader, runner or FakeCommandRunner.tlp()).scan()
    return ReconciliationEngine(reader).compute_changes(snapshot, target)


def by_path(change_set):
    return {c.path: c for c in change_set}


def test_desktop_changes_on_untuned_host(host):
    changes = by_path(compute(host, DESKTOP))

    assert changes[paths.CPU_GOVERNOR].old_value == "powersave"
    assert changes[paths.CPU_GOVERNOR].new_value == "performance"
    assert changes[paths.VM_SWAPPINESS].new_value == "10"
    assert changes[paths.TCP_CONGESTION].new_value == "bbr"
    assert changes[paths.TCP_RMEM].old_value == "4096 131072 6291456"
    assert changes[paths.TCP_RMEM].new_value == "4096 131072 67108864"
    assert changes[paths.block_queue_path("nvme0n1", "read_ahead_kb")].new_value == "256"

    # already at target
    assert paths.CPU_EPP not in changes
    assert paths.INTEL_NO_TURBO not in changes
    assert paths.THP_ENABLED not in changes
    assert paths.VM_DIRTY_RATIO not in changes
    assert paths.block_queue_path("nvme0n1", "scheduler") not in changes


def test_changes_are_grouped_in_subsystem_order(host):
    host.add_disk("sda", scheduler="[mq-deadline] bfq", rotational=1)
    change_set = compute(host, SERVER)

    ranks = [SUBSYSTEM_ORDER.index(c.subsystem) for c in change_set]
    assert ranks == sorted(ranks)
    assert set(ranks) == {0, 1, 2, 3}


def test_compute_is_stable(host):
    first = compute(host, SERVER)
    second = compute(host, SERVER)
    assert first.changes == second.changes


@pytest.mark.parametrize("target", [SERVER, DESKTOP, LAPTOP_AC, LAPTOP_BATTERY])
def test_apply_then_recompute_is_empty(host, target):
    host.add_disk("sda", scheduler="[mq-deadline] bfq", rotational=1, read_ahead_kb=4096)

    change_set = compute(host, target)
    assert change_set

    report = ApplyExecutor().apply(change_set.changes, auto=True)
    assert report.failed == 0

    assert compute(host, target).changes == []


def test_whitespace_in_observed_value_is_not_a_change(host):
    host.write(paths.VM_SWAPPINESS, " 10\n")
    assert paths.VM_SWAPPINESS not in by_path(compute(host, SERVER))


def test_unobserved_tunable_is_skipped(host):
    host.remove(paths.VM_SWAPPINESS)
    host.remove(paths.TCP_CONGESTION)
    changes = by_path(compute(host, SERVER))

    assert paths.VM_SWAPPINESS not in changes
    assert paths.TCP_CONGESTION not in changes
    assert paths.VM_DIRTY_RATIO in changes


# =============================================================================
# Turbo
# =============================================================================

def test_inverted_turbo_turned_off_writes_one(host):
    change = by_path(compute(host, LAPTOP_BATTERY))[paths.INTEL_NO_TURBO]

    assert change.old_value == "0"
    assert change.new_value == "1"
    assert change.parameter == "Turbo Boost (no_turbo)"

    change.apply()
    assert host.read(paths.INTEL_NO_TURBO) == "1"


def test_direct_turbo_already_on_is_no_change(tmp_path):
    fake = build_host(tmp_path, turbo="boost")
    assert paths.CPU_BOOST not in by_path(compute(fake, SERVER))


def test_direct_turbo_turned_off_writes_zero(tmp_path):
    fake = build_host(tmp_path, turbo="boost")
    change = by_path(compute(fake, LAPTOP_BATTERY))[paths.CPU_BOOST]
    assert (change.old_value, change.new_value) == ("1", "0")
    assert change.parameter == "Turbo Boost (boost)"


def test_both_turbo_surfaces_use_no_turbo(tmp_path):
    fake = build_host(tmp_path, turbo="both")
    changes = by_path(compute(fake, LAPTOP_BATTERY))
    assert paths.INTEL_NO_TURBO in changes
    assert paths.CPU_BOOST not in changes


def test_no_turbo_surface_no_turbo_change(tmp_path):
    fake = build_host(tmp_path, turbo="none")
    changes = compute(fake, LAPTOP_BATTERY)
    assert not [c for c in changes if c.parameter.startswith("Turbo")]


# =============================================================================
# CPU fan-out and power daemon deference
# =============================================================================

def test_governor_change_reaches_every_cpu(tmp_path):
    fake = build_host(tmp_path, cpus=4)
    change = by_path(compute(fake, SERVER))[paths.CPU_GOVERNOR]

    change.apply()
    for cpu in range(4):
        assert fake.read(f"{paths.CPU_BASE}/cpu{cpu}/cpufreq/{paths.ATTR_GOVERNOR}") == "performance"


def test_enabled_tlp_suppresses_cpu_changes(host):
    change_set = compute(host, LAPTOP_BATTERY, FakeCommandRunner.tlp(enabled="enabled"))

    assert change_set.by_subsystem(Subsystem.CPU) == []
    assert change_set.by_subsystem(Subsystem.MEMORY)
    assert change_set.suppressed[0].subsystem == Subsystem.CPU
    assert "TLP" in change_set.warnings[0]


def test_tlp_ignored_when_profile_does_not_defer(host):
    change_set = compute(host, SERVER, FakeCommandRunner.tlp(enabled="enabled", active="active"))
    assert change_set.by_subsystem(Subsystem.CPU)
    assert change_set.suppressed == []


def test_installed_but_disabled_tlp_does_not_suppress(host):
    change_set = compute(host, LAPTOP_AC, FakeCommandRunner.tlp(enabled="disabled", active="active"))
    assert change_set.by_subsystem(Subsystem.CPU)


# =============================================================================
# Storage
# =============================================================================

def test_scheduler_per_disk_class(host):
    host.add_disk("sda", scheduler="[mq-deadline] kyber bfq", rotational=0)
    host.add_disk("sdb", scheduler="[mq-deadline] kyber bfq", rotational=1)
    changes = by_path(compute(host, SERVER))

    assert changes[paths.block_queue_path("sda", "scheduler")].new_value == "kyber"
    assert changes[paths.block_queue_path("sdb", "scheduler")].new_value == "bfq"
    assert changes[paths.block_queue_path("sda", "scheduler")].parameter == "sda scheduler"


def test_zero_read_ahead_target_leaves_read_ahead_alone(host):
    target = replace(SERVER, read_ahead_kb=0)
    changes = by_path(compute(host, target))
    assert paths.block_queue_path("nvme0n1", "read_ahead_kb") not in changes


def test_backup_values_hold_original_encodings(host):
    host.reader().write_all_cpus(paths.ATTR_GOVERNOR, "performance")
    values = compute(host, LAPTOP_BATTERY).backup_values()

    # per-CPU attributes are keyed by the cpu0 node only
    assert values[paths.CPU_GOVERNOR] == "performance"
    assert f"{paths.CPU_BASE}/cpu1/cpufreq/{paths.ATTR_GOVERNOR}" not in values
    assert values[paths.INTEL_NO_TURBO] == "0"
    assert values[paths.VM_SWAPPINESS] == "60"
    assert values[paths.TCP_WMEM] == "4096 16384 4194304"


def test_three_disk_classes_on_none_scheduler(tmp_path):
    fake = build_host(tmp_path)
    fake.add_disk("sda", scheduler="[none] mq-deadline kyber bfq", rotational=0)
    fake.add_disk("sdb", scheduler="[none] mq-deadline kyber bfq", rotational=1)
    target = replace(SERVER, read_ahead_kb=0)

    storage = compute(fake, target).by_subsystem(Subsystem.STORAGE)

    assert [(c.parameter, c.new_value) for c in storage] == [
        ("sda scheduler", "kyber"),
        ("sdb scheduler", "bfq"),
    ]
