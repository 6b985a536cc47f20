"""Tests for dwmmsg.config -- YAML config loading."""

import pytest

from dwmmsg.config import DEFAULT_SOCKET_PATH, Config, default_config_path, load_config
from dwmmsg.protocol import ConfigError


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == Config()
    assert config.socket_path == DEFAULT_SOCKET_PATH == "/tmp/dwm.sock"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_all_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("socket: /run/dwm.sock\nignore_reply: true\nlog_level: DEBUG\n")
    config = load_config(path)
    assert config.socket_path == "/run/dwm.sock"
    assert config.ignore_reply is True
    assert config.log_level == "debug"


def test_socket_expands_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "config.yaml"
    path.write_text("socket: ~/dwm.sock\n")
    assert load_config(path).socket_path == str(tmp_path / "dwm.sock")


def test_default_path_uses_xdg(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_path() == tmp_path / "dwm-msg" / "config.yaml"

    (tmp_path / "dwm-msg").mkdir()
    (tmp_path / "dwm-msg" / "config.yaml").write_text("socket: /tmp/other.sock\n")
    assert load_config().socket_path == "/tmp/other.sock"


@pytest.mark.parametrize("content,match", [
    ("socket: [unclosed\n", "Invalid YAML"),
    ("- just\n- a list\n", "mapping"),
    ("socket: 42\n", "socket"),
    ("ignore_reply: maybe\n", "ignore_reply"),
    ("log_level: loud\n", "log_level"),
])
def test_invalid_config(tmp_path, content, match):
    path = tmp_path / "config.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError, match=match):
        load_config(path)


def test_unknown_keys_warn(tmp_path, caplog):
    path = tmp_path / "config.yaml"
    path.write_text("colour: blue\n")
    with caplog.at_level("WARNING", logger="dwmmsg.config"):
        assert load_config(path) == Config()
    assert "colour" in caplog.text
