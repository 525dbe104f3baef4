"""Tests for config module."""

import json

import pytest

from scriptcast.config import (
    ApiKeyProvider,
    load_config,
    save_config,
    validate_api_key,
    validate_file_name,
)
from scriptcast.constants import API_KEY_ENV, CONFIG_ENV

KEY = "AIza" + "x" * 35


def test_load_missing_config(tmp_path):
    assert load_config(str(tmp_path / "missing.json")) == {}


def test_load_malformed_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert load_config(str(path)) == {}


def test_save_creates_directory(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_config({"a": 1}, str(path))
    assert json.loads(path.read_text()) == {"a": 1}


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    monkeypatch.setenv(CONFIG_ENV, str(path))
    save_config({"b": 2})
    assert load_config() == {"b": 2}


def test_env_key_wins(tmp_path):
    path = tmp_path / "config.json"
    save_config({"google_api_key": "from-file-" + "y" * 20}, str(path))
    provider = ApiKeyProvider(path=str(path), environ={API_KEY_ENV: KEY})
    assert provider.get() == KEY


def test_key_from_file(tmp_path):
    path = tmp_path / "config.json"
    provider = ApiKeyProvider(path=str(path), environ={})
    assert provider.get() is None
    provider.set(f"  {KEY}  ")
    assert provider.get() == KEY


def test_set_keeps_other_settings(tmp_path):
    path = tmp_path / "config.json"
    save_config({"theme": "dark"}, str(path))
    ApiKeyProvider(path=str(path), environ={}).set(KEY)
    assert load_config(str(path)) == {"theme": "dark", "google_api_key": KEY}


def test_set_rejects_short_key(tmp_path):
    provider = ApiKeyProvider(path=str(tmp_path / "config.json"), environ={})
    with pytest.raises(ValueError):
        provider.set("short")
    assert not (tmp_path / "config.json").exists()


def test_validate_api_key():
    assert validate_api_key(KEY)
    assert not validate_api_key("x" * 20)
    assert validate_api_key("x" * 21)
    assert not validate_api_key("")
    assert not validate_api_key(None)


def test_validate_file_name():
    assert validate_file_name("TTS_20240101120000")
    assert validate_file_name("대본 녹음")
    assert not validate_file_name("")
    assert not validate_file_name("a<b")
    assert not validate_file_name("back\\slash")
