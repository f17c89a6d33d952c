"""Tests for utils.config module."""

import pytest

from core.dictionary_config import DictionaryConfig
from utils.config import AppSettings, Config


class TestConfigInit:
    """Tests for Config initialization."""

    def test_config_initialization_creates_settings_table(self, settings):
        """Test that settings table is created on initialization."""
        with settings._get_connection() as conn:
            result = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='settings'"
            ).fetchone()
        assert result is not None

    def test_config_initialization_inserts_default_settings(self, settings):
        """Test that all default settings are inserted."""
        with settings._get_connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM settings").fetchone()[0]
        assert count == len(AppSettings.model_fields)

    def test_reopening_keeps_values(self, tmp_path):
        """Test that values survive a new Config on the same database."""
        db_path = tmp_path / "settings.db"
        Config(db_path).set("root_topic", "Einfach gut")
        assert Config(db_path).get("root_topic") == "Einfach gut"


class TestConfigGet:
    """Tests for Config.get, get_list and get_all."""

    def test_get_string_value(self, settings):
        assert settings.get("language_from") == "de"

    def test_get_list_value(self, settings):
        """Test that articles keep their trailing spaces."""
        assert settings.get("articles") == ["die ", "das ", "der "]

    def test_text_settings_not_coerced(self, settings):
        """Test that a delimiter that looks like a number stays text."""
        settings.set("translation_delimiter", "1")
        assert settings.get("translation_delimiter") == "1"

    def test_missing_key_uses_model_default(self, settings):
        with settings._get_connection() as conn:
            conn.execute("DELETE FROM settings WHERE key = 'delimiter'")
        assert settings.get("delimiter") == "|"

    def test_unknown_key_with_default(self, settings):
        assert settings.get("nonexistent_key", default="custom") == "custom"
        assert settings.get("nonexistent_key") is None

    def test_get_list_from_comma_separated(self, settings):
        settings.set("languages_to", "en, uk,,fr")
        assert settings.get_list("languages_to") == ["en", "uk", "fr"]

    def test_get_all_contains_defaults(self, settings):
        all_settings = settings.get_all()
        for key in AppSettings.model_fields:
            assert key in all_settings


class TestConfigSet:
    """Tests for Config.set validation."""

    def test_empty_languages_rejected(self, settings):
        with pytest.raises(ValueError):
            settings.set("languages_to", " , ")

    def test_empty_delimiter_rejected(self, settings):
        with pytest.raises(ValueError):
            settings.set("delimiter", "")

    def test_file_encoding_normalized(self, settings):
        settings.set("file_encoding", "CP1251")
        assert settings.get("file_encoding") == "cp1251"

    def test_unknown_file_encoding_rejected(self, settings):
        with pytest.raises(ValueError):
            settings.set("file_encoding", "no-such-codec")

    def test_articles_from_json_text(self, settings):
        settings.set("articles", '["der ", "die "]')
        assert settings.get("articles") == ["der ", "die "]

    def test_custom_key_stored(self, settings):
        settings.set("window_width", 800)
        assert settings.get("window_width") == 800


class TestFallbackDictionaryConfig:
    """Tests for Config.fallback_dictionary_config."""

    def test_defaults(self, settings):
        config = settings.fallback_dictionary_config()

        assert isinstance(config, DictionaryConfig)
        assert config.languages_to == ["en"]
        assert config.articles == ["die ", "das ", "der "]
        assert config.topic_flag == "\t"

    def test_escaped_settings_resolved(self, settings):
        settings.set("delimiter", "\\|\\|")
        settings.set("languages_to", "en,uk")
        settings.set("root_topic", "Einfach gut A1.1")

        config = settings.fallback_dictionary_config()

        assert config.delimiter == "||"
        assert config.languages_to == ["en", "uk"]
        assert config.root_topic == "Einfach gut A1.1"
