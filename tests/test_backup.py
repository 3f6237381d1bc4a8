import os
from datetime import datetime

import pytest

from agentstart.backup import BackupError, BackupHelper
from agentstart.filesystem import LocalFileSystem


@pytest.fixture
def fs():
    return LocalFileSystem()


def test_creates_backup_successfully(fs, tmp_path):
    config_path = str(tmp_path / "agents.toml")
    content = b"[agents.test]\nbin = \"test\""
    fs.write_file(config_path, content, 0o644)

    backup_path = BackupHelper(fs).create_backup(config_path)

    assert "agents" in os.path.basename(backup_path)
    assert fs.exists(backup_path)
    assert fs.read_file(backup_path) == content
    assert fs.read_file(config_path) == content


def test_returns_error_when_file_does_not_exist(fs, tmp_path):
    helper = BackupHelper(fs)
    with pytest.raises(BackupError, match="does not exist"):
        helper.create_backup(str(tmp_path / "nonexistent.toml"))


def test_backup_name_uses_timestamp_format(fs, tmp_path):
    config_path = str(tmp_path / "tasks.toml")
    fs.write_file(config_path, b"[tasks.old]\nprompt = \"old\"", 0o644)
    helper = BackupHelper(fs, clock=lambda: datetime(2025, 1, 2, 3, 4, 5))

    backup_path = helper.create_backup(config_path)

    assert backup_path == str(tmp_path / "tasks.2025-01-02-030405.toml")


def test_non_toml_file_keeps_its_extension(fs, tmp_path):
    config_path = str(tmp_path / "notes.txt")
    fs.write_file(config_path, b"hello", 0o644)
    helper = BackupHelper(fs, clock=lambda: datetime(2025, 1, 2, 3, 4, 5))

    backup_path = helper.create_backup(config_path)

    assert os.path.basename(backup_path) == "notes.txt.2025-01-02-030405.toml"
    assert fs.read_file(backup_path) == b"hello"


def test_write_failure_raises_backup_error(fs, tmp_path):
    config_path = str(tmp_path / "roles.toml")
    fs.write_file(config_path, b"[roles.old]", 0o644)

    class ReadOnly(LocalFileSystem):
        def write_file(self, path, data, mode=0o644):
            raise PermissionError("read-only")

    with pytest.raises(BackupError, match="failed to write backup file"):
        BackupHelper(ReadOnly()).create_backup(config_path)