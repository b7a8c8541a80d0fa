import pytest

from rclonemgr.args import Arguments


def test_no_args():
    with pytest.raises(SystemExit):
        Arguments.parse([])


def test_unknown_command():
    with pytest.raises(SystemExit):
        Arguments.parse(["format"])


def test_list():
    args = Arguments.parse(["list"])

    assert args.command == "list"
    assert args.config is None
    assert args.settings == "~/.config/rclone-manager/config"
    assert not args.debug


def test_global_options():
    args = Arguments.parse(
        ["--debug", "--config=~/x.conf", "--plugins", "/p", "--settings=/s", "list"]
    )

    assert args.debug
    assert args.config == "~/x.conf"
    assert args.plugins == "/p"
    assert args.settings == "/s"


@pytest.mark.parametrize(
    "command", ["mount", "unmount", "test", "schedule", "unschedule"]
)
def test_remote_commands(command):
    args = Arguments.parse([command, "photos"])

    assert args.command == command
    assert args.remote == "photos"

    with pytest.raises(SystemExit):
        Arguments.parse([command])


def test_add():
    args = Arguments.parse(["add", "sftp", "backup", "host=example.com", "pass=a=b"])

    assert args.plugin == "sftp"
    assert args.remote == "backup"
    assert args.fields == [("host", "example.com"), ("pass", "a=b")]
    assert args.submission == {
        "remote_name": "backup",
        "host": "example.com",
        "pass": "a=b",
    }


def test_add_without_fields():
    args = Arguments.parse(["add", "s3", "bucket"])

    assert args.submission == {"remote_name": "bucket"}


def test_add_empty_value():
    args = Arguments.parse(["add", "sftp", "backup", "key_file="])

    assert args.submission["key_file"] == ""


def test_add_invalid_field():
    with pytest.raises(SystemExit):
        Arguments.parse(["add", "sftp", "backup", "host"])

    with pytest.raises(SystemExit):
        Arguments.parse(["add", "sftp", "backup", "=value"])
