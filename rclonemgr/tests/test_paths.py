import pytest

from rclonemgr.errors import HomeDirectoryError, ManagerError
from rclonemgr.paths import expand_home, home_dir, mount_dir, resolve_config_path


def test_home_dir():
    assert home_dir({"HOME": "/home/u"}) == "/home/u"


def test_home_dir_missing():
    with pytest.raises(HomeDirectoryError):
        home_dir({})

    with pytest.raises(ManagerError):
        home_dir({"HOME": ""})


def test_home_dir_from_environment(monkeypatch):
    monkeypatch.setenv("HOME", "/home/env")
    assert home_dir() == "/home/env"

    monkeypatch.delenv("HOME")
    with pytest.raises(HomeDirectoryError):
        home_dir()


def test_expand_tilde():
    assert expand_home("~/x", "/home/u") == "/home/u/x"
    assert expand_home("~", "/home/u") == "/home/u"


def test_expand_absolute_unchanged():
    assert expand_home("/abs/x", "/home/u") == "/abs/x"
    assert expand_home("relative/~/x", "/home/u") == "relative/~/x"


def test_expand_only_first_tilde():
    assert expand_home("~/a/~/b", "/home/u") == "/home/u/a/~/b"


def test_expand_absolute_without_home(monkeypatch):
    monkeypatch.delenv("HOME", raising=False)
    assert expand_home("/abs/x") == "/abs/x"


def test_resolve_config_path():
    assert resolve_config_path("~/my.conf", "/home/u") == "/home/u/my.conf"
    assert resolve_config_path("/etc/rclone.conf", "/home/u") == "/etc/rclone.conf"


def test_resolve_default_config_path():
    assert resolve_config_path(None, "/home/u") == "/home/u/.config/rclone/rclone.conf"


def test_mount_dir():
    assert mount_dir("photos", home="/home/u") == "/home/u/mnt/photos"
    assert mount_dir("photos", "/media", "/home/u") == "/media/photos"
