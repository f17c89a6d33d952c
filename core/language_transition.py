"""Reshaping word rows when the target language set changes."""

import logging
from typing import Iterable

from core.dictionary_config import DictionaryConfig
from core.dictionary_helpers import create_next_language_key
from core.models import DictionaryRow, LanguageChangeResult, RenamePair, WordRow

log = logging.getLogger("wordlisteditor.language_transition")

ERROR_LANGUAGE_NOT_FOUND = "languageNotFound"
ERROR_LANGUAGE_EXISTS = "languageExists"
ERROR_CANNOT_REMOVE_LAST = "cannotRemoveLastTranslationColumn"


def _has_any_non_empty(values: list[str]) -> bool:
    return any(value.strip() for value in values)


def apply_language_transition_to_rows(
    rows: list[DictionaryRow],
    next_languages: list[str],
    rename_pairs: Iterable[RenamePair] = (),
) -> list[DictionaryRow]:
    """Move renamed columns and add missing languages to every word row.

    A rename onto an existing column only replaces it when the renamed column
    has content. Rows that need no change are returned as the same objects.

    Args:
        rows: Current rows
        next_languages: Target languages after the change
        rename_pairs: Columns to move to a new key

    Returns:
        New list of rows
    """
    rename_pairs = list(rename_pairs)
    result: list[DictionaryRow] = []

    for row in rows:
        if not isinstance(row, WordRow):
            result.append(row)
            continue

        values_to = dict(row.values_to)
        changed = False

        for pair in rename_pairs:
            if pair.from_language not in values_to:
                continue
            moved = values_to.pop(pair.from_language)
            changed = True
            if pair.to_language in values_to and not _has_any_non_empty(moved):
                continue
            values_to[pair.to_language] = moved

        for language in next_languages:
            if language not in values_to:
                values_to[language] = []
                changed = True

        result.append(row.model_copy(update={"values_to": values_to}) if changed else row)

    return result


def apply_languages_to(
    rows: list[DictionaryRow], languages_to: list[str]
) -> list[DictionaryRow]:
    """Rebuild each word row's translations with exactly ``languages_to`` keys."""
    result: list[DictionaryRow] = []
    for row in rows:
        if not isinstance(row, WordRow):
            result.append(row)
            continue
        values_to = {
            language: row.values_to.get(language, []) for language in languages_to
        }
        if values_to == row.values_to and list(values_to) == list(row.values_to):
            result.append(row)
        else:
            result.append(row.model_copy(update={"values_to": values_to}))
    return result


def transition_languages(
    config: DictionaryConfig,
    rows: list[DictionaryRow],
    next_languages: list[str],
    rename_pairs: Iterable[RenamePair] = (),
) -> tuple[DictionaryConfig, list[DictionaryRow]]:
    """Switch the configuration to ``next_languages`` and reshape the rows.

    Returns:
        Tuple of (new config, new rows); every word row ends up with exactly
        the ``next_languages`` keys
    """
    next_languages = list(next_languages)
    moved = apply_language_transition_to_rows(rows, next_languages, rename_pairs)
    new_rows = apply_languages_to(moved, next_languages)
    new_config = config.model_copy(update={"languages_to": next_languages})
    log.debug(
        f"Languages {', '.join(config.languages_to)} -> {', '.join(next_languages)}"
    )
    return new_config, new_rows


def _failure(
    config: DictionaryConfig, rows: list[DictionaryRow], error: str, **params: str
) -> LanguageChangeResult:
    log.info(f"Language change rejected: {error} {params}")
    return LanguageChangeResult(
        ok=False, error=error, error_params=params, config=config, rows=rows
    )


def check_rename_pairs(
    config: DictionaryConfig,
    rows: list[DictionaryRow],
    rename_pairs: Iterable[RenamePair],
) -> LanguageChangeResult:
    """Reject renames that would read a missing column or overwrite content.

    A rename onto a configured language is only accepted while that language's
    column is empty in every word row. The inputs are returned unchanged.
    """
    for pair in rename_pairs:
        if pair.from_language not in config.languages_to:
            return _failure(
                config, rows, ERROR_LANGUAGE_NOT_FOUND, language=pair.from_language
            )
        if pair.to_language == pair.from_language:
            continue
        if pair.to_language in config.languages_to and any(
            _has_any_non_empty(row.values_to.get(pair.to_language, []))
            for row in rows
            if isinstance(row, WordRow)
        ):
            return _failure(
                config, rows, ERROR_LANGUAGE_EXISTS, language=pair.to_language
            )
    return LanguageChangeResult(ok=True, config=config, rows=rows)


def rename_language(
    config: DictionaryConfig,
    rows: list[DictionaryRow],
    from_language: str,
    to_language: str,
) -> LanguageChangeResult:
    """Rename one target language column, keeping its translations.

    Fails without touching the inputs when ``from_language`` is not configured
    or ``to_language`` already is. A blank or unchanged name is a no-op.
    """
    next_language = to_language.strip()
    if not next_language or next_language == from_language:
        return LanguageChangeResult(ok=True, config=config, rows=rows)
    if from_language not in config.languages_to:
        return _failure(config, rows, ERROR_LANGUAGE_NOT_FOUND, language=from_language)
    if next_language in config.languages_to:
        return _failure(config, rows, ERROR_LANGUAGE_EXISTS, language=next_language)

    languages_to = [
        next_language if language == from_language else language
        for language in config.languages_to
    ]
    pair = RenamePair(from_language=from_language, to_language=next_language)
    new_config, new_rows = transition_languages(config, rows, languages_to, [pair])
    return LanguageChangeResult(ok=True, config=new_config, rows=new_rows)


def add_language(
    config: DictionaryConfig, rows: list[DictionaryRow], insert_at: int
) -> LanguageChangeResult:
    """Insert a new ``langN`` column at ``insert_at`` (clamped to the range)."""
    languages_to = list(config.languages_to)
    position = max(0, min(insert_at, len(languages_to)))
    languages_to.insert(position, create_next_language_key(languages_to))
    new_config, new_rows = transition_languages(config, rows, languages_to)
    return LanguageChangeResult(ok=True, config=new_config, rows=new_rows)


def remove_language(
    config: DictionaryConfig, rows: list[DictionaryRow], language: str
) -> LanguageChangeResult:
    """Drop a target language column; the last column cannot be removed."""
    languages_to = [item for item in config.languages_to if item != language]
    if not languages_to:
        return _failure(config, rows, ERROR_CANNOT_REMOVE_LAST, language=language)
    new_config, new_rows = transition_languages(config, rows, languages_to)
    return LanguageChangeResult(ok=True, config=new_config, rows=new_rows)
