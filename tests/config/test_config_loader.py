# tests/config/test_config_loader.py
import json

from promptsync.config.loader import get_config, load_config, reset_config_cache, save_config
from promptsync.config.paths import get_user_config_file, get_user_log_dir
from promptsync.config.schema import AppConfig
from promptsync.core.models import MatchMode, TaskType


def test_defaults_when_no_file(isolated_home):
    config = load_config()
    assert config.default_task_type is TaskType.FEATURE
    assert config.match_mode is MatchMode.PATH
    assert config.read_encodings == ["utf-8"]
    assert get_user_config_file().parent == isolated_home


def test_get_config_is_cached():
    assert get_config() is get_config()


def test_save_then_load(isolated_home):
    config = AppConfig(default_task_type="Refactor", last_instruction="tidy up", match_mode="name")
    assert save_config(config)
    reset_config_cache()
    loaded = load_config()
    assert loaded.default_task_type is TaskType.REFACTOR
    assert loaded.last_instruction == "tidy up"
    assert loaded.match_mode is MatchMode.NAME
    assert not list(isolated_home.glob(".config.json_tmp*"))


def test_corrupted_file_is_backed_up(isolated_home):
    config_file = get_user_config_file()
    config_file.write_text("{not json", encoding="utf-8")
    config = load_config()
    assert config == AppConfig()
    assert not config_file.exists()
    assert config_file.with_suffix(".json.corrupted").exists()


def test_invalid_values_fall_back_to_defaults():
    get_user_config_file().write_text(json.dumps({"read_encodings": [], "render_debounce_ms": -1}), encoding="utf-8")
    assert load_config() == AppConfig()


def test_unknown_task_type_in_file_means_feature():
    get_user_config_file().write_text(json.dumps({"default_task_type": "Haiku"}), encoding="utf-8")
    assert load_config().default_task_type is TaskType.FEATURE


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PROMPTSYNC_MATCH_MODE", "name")
    monkeypatch.setenv("PROMPTSYNC_LOG_LEVEL", "debug")
    config = load_config()
    assert config.match_mode is MatchMode.NAME
    assert config.log_level == "DEBUG"


def test_log_dir_is_created(isolated_home):
    log_dir = get_user_log_dir()
    assert log_dir.is_dir()
    assert log_dir.parent == isolated_home
