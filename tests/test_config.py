"""Tests for persisted settings."""

import json

import pytest

from text_titler.config import DEFAULT_MODEL_ID, Settings, load_settings, save_settings
from text_titler.errors import ConfigurationError


@pytest.fixture(autouse=True)
def no_env_keys(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.api_key == ""
        assert settings.model_id == DEFAULT_MODEL_ID
        assert settings.number_of_sentences == 8
        assert settings.auto_update_untitled_notes is False

    def test_camel_case_keys(self):
        settings = Settings.model_validate({"apiKey": "k", "numberOfSentences": 3})
        assert settings.api_key == "k"
        assert settings.number_of_sentences == 3

    @pytest.mark.parametrize("count", [0, -2])
    def test_rejects_non_positive_sentence_count(self, count):
        with pytest.raises(ValueError):
            Settings(number_of_sentences=count)

    def test_rejects_blank_model(self):
        with pytest.raises(ValueError):
            Settings(model_id="  ")

    def test_require_api_key(self):
        with pytest.raises(ConfigurationError):
            Settings().require_api_key()
        assert Settings(api_key="k").require_api_key() == "k"


class TestLoadSave:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.json") == Settings()

    def test_round_trip(self, tmp_path):
        path = tmp_path / "cfg" / "settings.json"
        save_settings(Settings(api_key="abc", number_of_sentences=4), path)

        stored = json.loads(path.read_text(encoding="utf-8"))
        assert stored["apiKey"] == "abc"
        assert stored["numberOfSentences"] == 4
        assert load_settings(path).number_of_sentences == 4

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"autoUpdateUntitledNotes": true}', encoding="utf-8")

        settings = load_settings(path)
        assert settings.auto_update_untitled_notes is True
        assert settings.number_of_sentences == 8

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"numberOfSentences": 0}', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_api_key_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
        assert load_settings(tmp_path / "nope.json").api_key == "from-env"

    def test_file_key_wins_over_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        path = tmp_path / "settings.json"
        path.write_text('{"apiKey": "from-file"}', encoding="utf-8")
        assert load_settings(path).api_key == "from-file"
