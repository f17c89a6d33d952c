"""Small helpers shared by the codec and the column operations."""

from core.dictionary_config import DictionaryConfig
from core.models import DictionaryRow, TopicRow

LANGUAGE_KEY_PREFIX = "lang"


def parse_translation_value(raw: str, delimiter: str) -> list[str]:
    """Split a translation cell into trimmed, non-empty values.

    Args:
        raw: Cell text
        delimiter: Translation delimiter; empty means the cell is one value

    Returns:
        List of translations in cell order
    """
    parts = raw.split(delimiter) if delimiter else [raw]
    return [value.strip() for value in parts if value.strip()]


def create_next_language_key(active_languages: list[str]) -> str:
    """Return the first ``langN`` key not already in use."""
    active = set(active_languages)
    index = 1
    while f"{LANGUAGE_KEY_PREFIX}{index}" in active:
        index += 1
    return f"{LANGUAGE_KEY_PREFIX}{index}"


def topic_for_row(
    rows: list[DictionaryRow], index: int, config: DictionaryConfig
) -> str:
    """Label of the nearest topic row above ``rows[index]``.

    Rows before the first topic belong to ``config.root_topic``.
    """
    for row in reversed(rows[:index]):
        if isinstance(row, TopicRow):
            return row.label
    return config.root_topic
