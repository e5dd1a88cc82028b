import json

import pytest

from portal.core.config import DEFAULT_REQUIRED_SERVICES, ConfigManager


def test_config_read_default():
    """Without a config path the defaults are used."""
    manager = ConfigManager(None)

    assert manager.data.general.app_name == "Portal"
    assert manager.data.bootstrap.required_services == DEFAULT_REQUIRED_SERVICES
    assert manager.data.bootstrap.deferred_components == ["court"]


def test_config_update_event():
    """update() emits on_changed with the new value."""
    manager = ConfigManager(None)
    received = []

    def on_change(section, key, val):
        received.append((section, key, val))

    manager.on_changed.connect(on_change)
    manager.update("general", "theme", "dark")

    assert manager.get("general", "theme") == "dark"
    assert received[-1] == ("general", "theme", "dark")


def test_update_validates():
    """Invalid values are rejected by update()."""
    manager = ConfigManager(None)

    with pytest.raises(ValueError):
        manager.update("missing", "key", 1)
    with pytest.raises(ValueError):
        manager.update("general", "missing", 1)
    with pytest.raises(ValueError):
        manager.update("space", "days", "not a number")


def test_creates_file_with_defaults(tmp_path):
    """A missing config file is created with defaults."""
    path = tmp_path / "config.json"
    ConfigManager(str(path))

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["storage"]["path"] == "data/store.json"


def test_update_persists(tmp_path):
    """Updated values are saved to disk."""
    path = str(tmp_path / "config.json")
    ConfigManager(path).update("bootstrap", "deferred_components", [])

    assert ConfigManager(path).data.bootstrap.deferred_components == []


def test_loads_toml(tmp_path):
    """TOML config files are read."""
    path = tmp_path / "config.toml"
    path.write_text('[general]\napp_name = "Court Desk"\n\n[bootstrap]\nrequired_services = ["court"]\n', encoding="utf-8")

    manager = ConfigManager(str(path))

    assert manager.data.general.app_name == "Court Desk"
    assert manager.data.bootstrap.required_services == ["court"]


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    """An unreadable file yields the default config."""
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    manager = ConfigManager(str(path))

    assert manager.data.general.app_name == "Portal"
    assert json.loads(path.read_text(encoding="utf-8"))["general"]["app_name"] == "Portal"
