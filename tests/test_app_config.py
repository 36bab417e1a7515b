import pytest

import utils.app_config as app_config


@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    config_dir = tmp_path / ".expense_tracker"
    monkeypatch.setattr(app_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(app_config, "CONFIG_FILE", config_dir / "config.json")
    return config_dir


def test_missing_file_gives_defaults():
    assert app_config.load_config() == {}
    assert app_config.get_db_folder() is None
    assert app_config.get_log_level() == "INFO"


def test_db_folder_round_trip(config_home):
    app_config.set_db_folder("/data/expenses")
    assert app_config.get_db_folder() == "/data/expenses"
    assert not (config_home / "config.tmp").exists()

    app_config.set_db_folder(None)
    assert app_config.get_db_folder() is None


def test_corrupt_or_odd_config_is_ignored(config_home):
    config_home.mkdir()
    app_config.CONFIG_FILE.write_text("{not json", encoding="utf-8")
    assert app_config.load_config() == {}

    app_config.CONFIG_FILE.write_text("[1, 2]", encoding="utf-8")
    assert app_config.load_config() == {}


def test_log_level_is_validated():
    app_config.save_config({"log_level": "debug"})
    assert app_config.get_log_level() == "DEBUG"

    app_config.save_config({"log_level": "chatty"})
    assert app_config.get_log_level() == "INFO"
