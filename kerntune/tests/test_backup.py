"""Tests for the backup store and restore."""

import json
from datetime import datetime

import pytest

from kerntune.discovery import SystemScanner
from kerntune.errors import BackupCorrupt, BackupMissing
from kerntune.profile.values import SERVER
from kerntune.snapshot import BackupRecord, BackupRestore, BackupStore
from kerntune.sysfs import paths
from kerntune.tuning import ReconciliationEngine

from .mocks import FakeCommandRunner, build_host


def test_save_and_load(tmp_path):
    store = BackupStore(tmp_path / "etc" / "kerntune" / "backup.json")
    values = {paths.VM_SWAPPINESS: "60", paths.INTEL_NO_TURBO: "0"}

    saved = store.save("laptop-battery", values)
    loaded = store.load()

    assert store.exists()
    assert loaded == saved
    assert loaded.profile == "laptop-battery"
    assert loaded.values == values


def test_timestamp_is_rfc3339_with_offset(tmp_path):
    record = BackupStore(tmp_path / "backup.json").save("server", {})
    parsed = datetime.fromisoformat(record.timestamp)
    assert parsed.tzinfo is not None
    assert "T" in record.timestamp


def test_document_layout(tmp_path):
    path = tmp_path / "backup.json"
    BackupStore(path).save("server", {paths.VM_SWAPPINESS: "60"})

    data = json.loads(path.read_text())
    assert set(data) == {"timestamp", "profile", "values"}
    assert data["values"] == {paths.VM_SWAPPINESS: "60"}


def test_save_replaces_previous_backup(tmp_path):
    store = BackupStore(tmp_path / "backup.json")
    store.save("server", {paths.VM_SWAPPINESS: "60"})
    store.save("desktop", {paths.VM_DIRTY_RATIO: "20"})

    record = store.load()
    assert record.profile == "desktop"
    assert record.values == {paths.VM_DIRTY_RATIO: "20"}


def test_load_missing(tmp_path):
    store = BackupStore(tmp_path / "backup.json")
    assert not store.exists()
    with pytest.raises(BackupMissing):
        store.load()


@pytest.mark.parametrize("content", [
    "{not json",
    "[]",
    '{"timestamp": "2026-01-01T00:00:00+00:00", "profile": "server"}',
    '{"timestamp": "2026-01-01T00:00:00+00:00", "profile": "server", "values": {"/proc/sys/vm/swappiness": 60}}',
])
def test_load_corrupt(tmp_path, content):
    path = tmp_path / "backup.json"
    path.write_text(content)
    with pytest.raises(BackupCorrupt):
        BackupStore(path).load()


def test_remove(tmp_path):
    store = BackupStore(tmp_path / "backup.json")
    store.save("server", {})
    store.remove()
    assert not store.exists()
    store.remove()


# =============================================================================
# Restore
# =============================================================================

def test_restore_writes_values_back(tmp_path):
    fake = build_host(tmp_path)
    fake.write(paths.VM_SWAPPINESS, "10\n")
    fake.write(paths.INTEL_NO_TURBO, "1\n")
    record = BackupRecord.create("laptop-battery", {
        paths.VM_SWAPPINESS: "60",
        paths.INTEL_NO_TURBO: "0",
    })

    result = BackupRestore(fake.reader()).restore(record)

    assert (result.succeeded, result.failed) == (2, 0)
    assert fake.read(paths.VM_SWAPPINESS) == "60"
    assert fake.read(paths.INTEL_NO_TURBO) == "0"


def test_restore_fans_out_per_cpu_values(tmp_path):
    fake = build_host(tmp_path, cpus=3)
    fake.reader().write_all_cpus(paths.ATTR_GOVERNOR, "performance")
    record = BackupRecord.create("server", {paths.CPU_GOVERNOR: "powersave"})

    BackupRestore(fake.reader()).restore(record)

    for cpu in range(3):
        assert fake.read(f"{paths.CPU_BASE}/cpu{cpu}/cpufreq/{paths.ATTR_GOVERNOR}") == "powersave"


def test_restore_skips_vanished_paths(tmp_path):
    fake = build_host(tmp_path)
    removed_disk = paths.block_queue_path("sdb", "scheduler")
    record = BackupRecord.create("server", {
        removed_disk: "mq-deadline",
        paths.VM_SWAPPINESS: "60",
    })

    result = BackupRestore(fake.reader()).restore(record)

    assert result.skipped == [removed_disk]
    assert result.succeeded == 1
    assert not fake.path(removed_disk).exists()


def test_restore_continues_after_failure(tmp_path):
    fake = build_host(tmp_path)
    fake.make_unwritable(paths.VM_DIRTY_RATIO)
    record = BackupRecord.create("server", {
        paths.VM_DIRTY_RATIO: "20",
        paths.VM_SWAPPINESS: "60",
        paths.TCP_CONGESTION: "cubic",
    })

    result = BackupRestore(fake.reader()).restore(record)

    assert (result.succeeded, result.failed) == (2, 1)
    assert not result.success
    assert fake.read(paths.TCP_CONGESTION) == "cubic"


def test_restore_on_unmodified_system_is_a_no_op(tmp_path):
    fake = build_host(tmp_path)
    reader = fake.reader()
    snapshot = SystemScanner(reader, FakeCommandRunner.tlp()).scan()
    change_set = ReconciliationEngine(reader).compute_changes(snapshot, SERVER)

    store = BackupStore(tmp_path / "backup.json")
    store.save("server", change_set.backup_values())
    record = store.load()
    assert record.values == {c.path: c.old_value for c in change_set}

    BackupRestore(reader).restore(record)

    after = SystemScanner(reader, FakeCommandRunner.tlp()).scan()
    assert after == snapshot
