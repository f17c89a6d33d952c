"""Tests for core.language_transition module."""

import pytest

from core.dictionary_config import DictionaryConfig
from core.language_transition import (
    ERROR_CANNOT_REMOVE_LAST,
    ERROR_LANGUAGE_EXISTS,
    ERROR_LANGUAGE_NOT_FOUND,
    add_language,
    apply_language_transition_to_rows,
    apply_languages_to,
    check_rename_pairs,
    remove_language,
    rename_language,
    transition_languages,
)
from core.models import RenamePair, TopicRow, WordRow


@pytest.fixture
def config():
    return DictionaryConfig(languages_to=["en", "uk"])


@pytest.fixture
def rows():
    """A topic followed by two word rows."""
    return [
        TopicRow(label="Lektion 1"),
        WordRow(value_from="Haus", values_to={"en": ["house", "home"], "uk": ["дім"]}),
        WordRow(value_from="Baum", values_to={"en": ["tree"], "uk": []}),
    ]


class TestApplyLanguageTransitionToRows:
    """Tests for apply_language_transition_to_rows."""

    def test_rename_moves_values(self, rows):
        result = apply_language_transition_to_rows(
            rows, ["fr", "uk"], [RenamePair(from_language="en", to_language="fr")]
        )

        assert result[1].values_to == {"fr": ["house", "home"], "uk": ["дім"]}
        assert result[2].values_to == {"fr": ["tree"], "uk": []}

    def test_empty_rename_does_not_clobber_existing_target(self):
        """Renaming an empty column onto a filled one keeps the filled one."""
        row = WordRow(value_from="Haus", values_to={"en": [], "fr": ["maison"]})

        result = apply_language_transition_to_rows(
            [row], ["fr"], [RenamePair(from_language="en", to_language="fr")]
        )

        assert result[0].values_to == {"fr": ["maison"]}

    def test_blank_values_count_as_empty(self):
        row = WordRow(value_from="Haus", values_to={"en": ["  "], "fr": ["maison"]})

        result = apply_language_transition_to_rows(
            [row], ["fr"], [RenamePair(from_language="en", to_language="fr")]
        )

        assert result[0].values_to == {"fr": ["maison"]}

    def test_rename_with_content_replaces_target(self):
        row = WordRow(value_from="Haus", values_to={"en": ["house"], "fr": ["maison"]})

        result = apply_language_transition_to_rows(
            [row], ["fr"], [RenamePair(from_language="en", to_language="fr")]
        )

        assert result[0].values_to == {"fr": ["house"]}

    def test_missing_source_language_is_skipped(self, rows):
        result = apply_language_transition_to_rows(
            rows, ["en", "uk"], [RenamePair(from_language="de", to_language="fr")]
        )
        assert result == rows

    def test_new_languages_added_empty(self, rows):
        result = apply_language_transition_to_rows(rows, ["en", "uk", "pl"])

        assert result[1].values_to["pl"] == []
        assert result[1].values_to["en"] == ["house", "home"]

    def test_topic_rows_pass_through(self, rows):
        result = apply_language_transition_to_rows(rows, ["pl"])
        assert result[0] is rows[0]

    def test_input_rows_not_mutated(self, rows):
        apply_language_transition_to_rows(
            rows, ["fr", "uk"], [RenamePair(from_language="en", to_language="fr")]
        )
        assert rows[1].values_to == {"en": ["house", "home"], "uk": ["дім"]}

    def test_idempotent_without_renames(self, rows):
        """Applying the same language set twice changes nothing the second time."""
        once = apply_language_transition_to_rows(rows, ["en", "uk", "pl"])
        twice = apply_language_transition_to_rows(once, ["en", "uk", "pl"])

        assert twice == once
        assert all(a is b for a, b in zip(once, twice))

    def test_rename_pair_accepts_from_to_aliases(self, rows):
        pair = RenamePair.model_validate({"from": "uk", "to": "ua"})
        result = apply_language_transition_to_rows(rows, ["en", "ua"], [pair])
        assert result[1].values_to["ua"] == ["дім"]


class TestApplyLanguagesTo:
    """Tests for apply_languages_to."""

    def test_stale_keys_pruned(self, rows):
        result = apply_languages_to(rows, ["uk"])
        assert result[1].values_to == {"uk": ["дім"]}

    def test_keys_follow_language_order(self, rows):
        result = apply_languages_to(rows, ["uk", "en"])
        assert list(result[1].values_to) == ["uk", "en"]

    def test_unchanged_rows_reused(self, rows):
        result = apply_languages_to(rows, ["en", "uk"])
        assert all(a is b for a, b in zip(rows, result))


class TestTransitionLanguages:
    """Tests for transition_languages."""

    def test_exact_key_set_after_rename(self, config, rows):
        new_config, new_rows = transition_languages(
            config, rows, ["fr", "pl"], [RenamePair(from_language="en", to_language="fr")]
        )

        assert new_config.languages_to == ["fr", "pl"]
        assert config.languages_to == ["en", "uk"]
        for row in new_rows[1:]:
            assert list(row.values_to) == ["fr", "pl"]
        assert new_rows[1].values_to["fr"] == ["house", "home"]


class TestCheckRenamePairs:
    """Tests for check_rename_pairs."""

    def test_rename_onto_new_language_accepted(self, config, rows):
        result = check_rename_pairs(
            config, rows, [RenamePair(from_language="en", to_language="fr")]
        )

        assert result.ok is True
        assert result.rows is rows

    def test_unknown_source_rejected(self, config, rows):
        result = check_rename_pairs(
            config, rows, [RenamePair(from_language="de", to_language="fr")]
        )

        assert result.ok is False
        assert result.error == ERROR_LANGUAGE_NOT_FOUND
        assert result.error_params == {"language": "de"}

    def test_rename_onto_filled_column_rejected(self, config, rows):
        result = check_rename_pairs(
            config, rows, [RenamePair(from_language="en", to_language="uk")]
        )

        assert result.ok is False
        assert result.error == ERROR_LANGUAGE_EXISTS
        assert result.error_params == {"language": "uk"}
        assert rows[1].values_to["uk"] == ["дім"]

    def test_rename_onto_empty_column_accepted(self, config):
        rows = [
            WordRow(value_from="Haus", values_to={"en": ["house"], "uk": []}),
            WordRow(value_from="Baum", values_to={"en": ["tree"], "uk": [" "]}),
        ]

        result = check_rename_pairs(
            config, rows, [RenamePair(from_language="en", to_language="uk")]
        )

        assert result.ok is True


class TestRenameLanguage:
    """Tests for rename_language."""

    def test_rename(self, config, rows):
        result = rename_language(config, rows, "en", "fr")

        assert result.ok is True
        assert result.config.languages_to == ["fr", "uk"]
        assert result.rows[1].values_to == {"fr": ["house", "home"], "uk": ["дім"]}

    def test_unknown_language_fails(self, config, rows):
        result = rename_language(config, rows, "de", "fr")

        assert result.ok is False
        assert result.error == ERROR_LANGUAGE_NOT_FOUND
        assert result.error_params == {"language": "de"}
        assert result.config == config
        assert result.rows == rows

    def test_existing_target_fails(self, config, rows):
        result = rename_language(config, rows, "en", "uk")

        assert result.ok is False
        assert result.error == ERROR_LANGUAGE_EXISTS
        assert rows[1].values_to["en"] == ["house", "home"]

    def test_blank_or_same_name_is_noop(self, config, rows):
        assert rename_language(config, rows, "en", "  ").ok is True
        unchanged = rename_language(config, rows, "en", "en")
        assert unchanged.ok is True
        assert unchanged.config == config

    def test_target_name_trimmed(self, config, rows):
        result = rename_language(config, rows, "en", " fr ")
        assert result.config.languages_to == ["fr", "uk"]


class TestAddRemoveLanguage:
    """Tests for add_language and remove_language."""

    def test_add_inserts_next_key(self, config, rows):
        result = add_language(config, rows, 1)

        assert result.config.languages_to == ["en", "lang1", "uk"]
        assert result.rows[1].values_to["lang1"] == []

    def test_add_position_clamped(self, config, rows):
        assert add_language(config, rows, 99).config.languages_to == ["en", "uk", "lang1"]
        assert add_language(config, rows, -3).config.languages_to == ["lang1", "en", "uk"]

    def test_remove_drops_values(self, config, rows):
        result = remove_language(config, rows, "en")

        assert result.ok is True
        assert result.config.languages_to == ["uk"]
        assert result.rows[1].values_to == {"uk": ["дім"]}

    def test_cannot_remove_last_language(self, rows):
        config = DictionaryConfig(languages_to=["en"])

        result = remove_language(config, rows, "en")

        assert result.ok is False
        assert result.error == ERROR_CANNOT_REMOVE_LAST
