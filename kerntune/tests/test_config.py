"""Tests for configuration loading."""

from argparse import Namespace

import pytest

from kerntune import config as config_module
from kerntune.config import Config


@pytest.fixture(autouse=True)
def no_search_paths(monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [])


def test_defaults():
    config = Config.load(environ={})

    assert config.paths.sysfs_root == "/"
    assert config.paths.backup_file == "/etc/kerntune/backup.json"
    assert config.paths.sysctl_dropin == "/etc/sysctl.d/99-kerntune.conf"
    assert config.paths.udev_rules == "/etc/udev/rules.d/99-kerntune-disk.rules"
    assert config.apply.auto is False
    assert config.reload.enabled is True


def test_load_from_file(tmp_path):
    path = tmp_path / "kerntune.toml"
    path.write_text(
        '[paths]\n'
        'backup_file = "/var/lib/kerntune/backup.json"\n'
        '\n'
        '[apply]\n'
        'auto = true\n'
        '\n'
        '[output]\n'
        'quiet = true\n'
        '\n'
        '[reload]\n'
        'enabled = false\n'
    )

    config = Config.load(str(path), environ={})

    assert config.paths.backup_file == "/var/lib/kerntune/backup.json"
    assert config.paths.sysfs_root == "/"
    assert config.apply.auto is True
    assert config.output.quiet is True
    assert config.reload.enabled is False
    assert str(path) in config.summary()


def test_search_paths_are_used(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text('[apply]\nauto = true\n')
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [tmp_path / "missing.toml", path])

    assert Config.load(environ={}).apply.auto is True


def test_missing_explicit_file():
    with pytest.raises(FileNotFoundError):
        Config.load("/nonexistent/kerntune.toml", environ={})


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "kerntune.toml"
    path.write_text('[paths]\nbackup_file = "/from/file.json"\n')

    config = Config.load(str(path), environ={
        "KERNTUNE_BACKUP_FILE": "/from/env.json",
        "KERNTUNE_SYSFS_ROOT": str(tmp_path),
    })

    assert config.paths.backup_file == "/from/env.json"
    assert config.paths.sysfs_root == str(tmp_path)


def test_arguments_override_environment():
    config = Config.load(environ={"KERNTUNE_BACKUP_FILE": "/from/env.json"})
    config.override_from_args(Namespace(
        backup_file="/from/args.json", sysfs_root=None, auto=True,
        verbose=None, quiet=True, no_color=True, no_reload=True,
    ))

    assert config.paths.backup_file == "/from/args.json"
    assert config.apply.auto is True
    assert config.output.quiet is True
    assert config.output.color is False
    assert config.reload.enabled is False


def test_validate(tmp_path):
    config = Config()
    config.paths.sysfs_root = str(tmp_path)
    assert config.validate() == []

    config.paths.sysfs_root = str(tmp_path / "missing")
    config.paths.backup_file = str(tmp_path)
    errors = config.validate()
    assert len(errors) == 2


@pytest.mark.parametrize("content", ["paths = 1\n", 'reload = "off"\n'])
def test_section_must_be_a_table(tmp_path, content):
    path = tmp_path / "kerntune.toml"
    path.write_text(content)
    with pytest.raises(ValueError, match="must be a table"):
        Config.load(str(path), environ={})
