"""Shared test fixtures for wordlist-editor tests."""

from pathlib import Path

import pytest

from core.dictionary_config import DictionaryConfig
from utils.config import Config

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fallback_config():
    """Configuration used for files without a header line."""
    return DictionaryConfig(
        language_from="de",
        languages_to=["en", "uk"],
        articles=[""],
        delimiter="|",
        additional_information_delimiter=";",
        translation_delimiter=";",
        topic_flag="\t",
        topic_delimiter="",
        root_topic="root",
    )


@pytest.fixture
def fixture_path():
    """Path of a real exported word list."""
    return FIXTURES_DIR / "Einfach_gut_A1.1.txt"


@pytest.fixture
def settings(tmp_path):
    """Create Config instance with a temporary database."""
    return Config(tmp_path / "settings.db")
