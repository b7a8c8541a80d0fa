import subprocess
from unittest import mock

import pytest

from rclonemgr.errors import ReadError, WriteError
from rclonemgr.schedule import CrontabScheduleStore


class MemoryCrontab(CrontabScheduleStore):
    """Crontab schedule store that keeps the table in memory."""

    def __init__(self, table: str = "", **kwargs):
        super().__init__(home="/home/u", **kwargs)
        self.table = table
        self.writes = 0

    def read_table(self) -> str:
        return self.table

    def write_table(self, table: str) -> None:
        self.table = table
        self.writes += 1


def test_mount_command():
    store = CrontabScheduleStore(home="/home/u")

    assert store.mount_command("a") == "rclone mount --vfs-cache-mode writes a:"
    assert store.entry("a") == (
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a"
    )


def test_mount_command_settings():
    store = CrontabScheduleStore("/media", "/home/u", "full", "/opt/rclone")

    assert store.entry("a") == (
        "@reboot /opt/rclone mount --vfs-cache-mode full a: /media/a"
    )


def test_contains():
    store = MemoryCrontab(
        "0 * * * * backup\n@reboot rclone mount --vfs-cache-mode writes a: /mnt/a\n"
    )

    assert store.contains("a")
    assert not store.contains("b")


def test_contains_empty_table():
    assert not MemoryCrontab().contains("a")


def test_contains_requires_whole_command():
    store = MemoryCrontab("@reboot rclone mount a: /home/u/mnt/a\n")

    assert not store.contains("a")


def test_add():
    store = MemoryCrontab("0 * * * * backup\n")

    assert store.add("a")
    assert store.table == (
        "0 * * * * backup\n"
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a\n"
    )


def test_add_to_empty_table():
    store = MemoryCrontab()

    assert store.add("a")
    assert store.table == (
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a\n"
    )


def test_add_without_trailing_newline():
    store = MemoryCrontab("0 * * * * backup")

    store.add("a")

    assert store.table.splitlines() == [
        "0 * * * * backup",
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a",
    ]


def test_add_idempotent():
    store = MemoryCrontab()

    assert store.add("a")
    assert not store.add("a")

    assert store.table.count("rclone mount --vfs-cache-mode writes a:") == 1
    assert store.writes == 1


def test_remove():
    store = MemoryCrontab(
        "0 * * * * backup\n"
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a\n"
        "@reboot rclone mount --vfs-cache-mode writes b: /home/u/mnt/b\n"
    )

    assert store.remove("a")
    assert store.table == (
        "0 * * * * backup\n"
        "@reboot rclone mount --vfs-cache-mode writes b: /home/u/mnt/b\n"
    )


def test_remove_all_matching_lines():
    store = MemoryCrontab(
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a\n"
        "@reboot sleep 10; rclone mount --vfs-cache-mode writes a: /media/a\n"
    )

    assert store.remove("a")
    assert store.table == ""


def test_remove_keeps_lines_mentioning_name():
    table = "0 * * * * rclone sync a: /backup/a\n"
    store = MemoryCrontab(table)

    assert not store.remove("a")
    assert store.table == table


def test_remove_nonexistent():
    table = "0 * * * * backup\n"
    store = MemoryCrontab(table)

    assert not store.remove("a")
    assert store.table == table
    assert store.writes == 0


def test_remove_from_empty_table():
    store = MemoryCrontab()

    assert not store.remove("a")
    assert store.writes == 0


def test_read_table():
    store = CrontabScheduleStore()

    with mock.patch("subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess([], 0, "table\n", "")

        assert store.read_table() == "table\n"

    assert mock_run.call_args[0][0] == ["crontab", "-l"]


def test_read_table_no_crontab():
    store = CrontabScheduleStore()

    with mock.patch("subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(
            [], 1, "", "no crontab for user\n"
        )

        assert store.read_table() == ""


def test_read_table_missing_crontab():
    store = CrontabScheduleStore()

    with mock.patch("subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(ReadError) as e:
            store.read_table()

    assert "failed to read crontab" in str(e.value)


def test_write_table():
    store = CrontabScheduleStore()

    with mock.patch("subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess([], 0, "", "")
        store.write_table("new table\n")

    assert mock_run.call_args[0][0] == ["crontab", "-"]
    assert mock_run.call_args[1]["input"] == "new table\n"


def test_write_table_rejected():
    store = CrontabScheduleStore()

    with mock.patch("subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(
            [], 1, "", "errors in crontab file\n"
        )

        with pytest.raises(WriteError) as e:
            store.write_table("bad\n")

    assert "errors in crontab file" in str(e.value)


def test_write_table_missing_crontab():
    store = CrontabScheduleStore()

    with mock.patch("subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(WriteError):
            store.write_table("")


def test_add_through_crontab():
    store = CrontabScheduleStore(home="/home/u")

    with mock.patch("subprocess.run") as mock_run:
        mock_run.side_effect = [
            subprocess.CompletedProcess([], 1, "", "no crontab for user\n"),
            subprocess.CompletedProcess([], 0, "", ""),
        ]

        assert store.add("a")

    assert mock_run.call_args[1]["input"] == (
        "@reboot rclone mount --vfs-cache-mode writes a: /home/u/mnt/a\n"
    )
