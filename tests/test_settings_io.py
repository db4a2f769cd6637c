from pathlib import Path

import pytest
import yaml

from korean_work.domain.enums import QuizLevel
from korean_work.services.settings_store import ENV_REMOTE_KEY, ENV_REMOTE_URL, SettingsStore


def test_save_and_load_roundtrip(settings: SettingsStore) -> None:
    """
    save() should write a UTF-8 YAML file and load() should reconstruct the same dictionary.
    """
    payload = {
        "quiz_counts": {1: 24, 2: 10, 3: 5},
        "choices_count": 4,
        "remote": {"url": "https://example.supabase.co", "api_key": "anon", "user_id": "민수"},
    }
    settings.save(payload)
    loaded = settings.load()
    assert loaded == payload
    assert "민수" in settings.path.read_text(encoding="utf-8")


def test_defaults_when_missing(settings: SettingsStore) -> None:
    assert settings.load() == {}
    assert settings.quiz_count(QuizLevel.LETTER) == 24
    assert settings.quiz_count(2) == 15
    assert settings.quiz_count(3) == 15
    assert settings.choices_count() == 4
    assert settings.max_attempts_factor() == 50
    assert not settings.remote_config().enabled


def test_malformed_file_loads_as_empty(tmp_path: Path) -> None:
    p = tmp_path / "settings.yaml"
    p.write_text("quiz_counts: [unclosed", encoding="utf-8")
    store = SettingsStore(p)
    assert store.load() == {}
    assert store.quiz_count(2) == 15


def test_invalid_values_fall_back(settings: SettingsStore) -> None:
    settings.save({"quiz_counts": {"2": "lots", "3": -1}, "choices_count": True})
    assert settings.quiz_count(2) == 15
    assert settings.quiz_count(3) == 15
    assert settings.choices_count() == 4


def test_update_preserves_other_keys(settings: SettingsStore) -> None:
    settings.save({"choices_count": 3, "max_attempts_factor": 20})
    settings.set_quiz_count(2, 8)

    loaded = settings.load()
    assert loaded["choices_count"] == 3
    assert loaded["max_attempts_factor"] == 20
    assert settings.quiz_count(2) == 8
    # string keys written by hand are read too
    settings.save({"quiz_counts": {"3": 6}})
    assert settings.quiz_count(3) == 6


def test_data_dir_relative_to_settings_file(settings: SettingsStore) -> None:
    settings.save({"data_dir": "banks"})
    assert settings.data_dir() == settings.path.parent / "banks"


def test_remote_config_env_overrides_file(settings: SettingsStore, monkeypatch: pytest.MonkeyPatch) -> None:
    settings.save({"remote": {"url": "https://file.example/", "api_key": "file-key"}})
    monkeypatch.delenv(ENV_REMOTE_URL, raising=False)
    monkeypatch.delenv(ENV_REMOTE_KEY, raising=False)

    cfg = settings.remote_config()
    assert cfg.url == "https://file.example"
    assert cfg.api_key == "file-key"
    assert cfg.user_id == "demo"
    assert cfg.enabled

    monkeypatch.setenv(ENV_REMOTE_URL, "https://env.example")
    monkeypatch.setenv(ENV_REMOTE_KEY, "env-key")
    cfg = settings.remote_config()
    assert (cfg.url, cfg.api_key) == ("https://env.example", "env-key")


def test_saved_file_is_plain_yaml(settings: SettingsStore) -> None:
    settings.set_quiz_count(QuizLevel.SYLLABLE_WITH_FINAL, 12)
    raw = yaml.safe_load(settings.path.read_text(encoding="utf-8"))
    assert raw == {"quiz_counts": {3: 12}}
    assert not settings.path.with_suffix(".yaml.tmp").exists()
