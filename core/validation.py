"""Validation rules for dictionary rows and configuration."""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.dictionary_config import DictionaryConfig
from core.models import DictionaryRow, TopicRow, WordRow
from core.token_codec import resolve_token

log = logging.getLogger("wordlisteditor.validation")

COLUMN_ID_WORD = "word"
COLUMN_ID_ARTICLE = "article"
COLUMN_ID_ADDITIONAL_INFO = "additional-info"
TRANSLATION_COLUMN_PREFIX = "to-"


class ValidationReason(str, Enum):
    """Why a cell cannot be stored as entered."""

    TRANSLATION_CONTAINS_COLUMN_DELIMITER = "translationContainsColumnDelimiter"
    CONTAINS_COLUMN_DELIMITER = "containsColumnDelimiter"
    CONTAINS_ADDITIONAL_INFORMATION_DELIMITER = "containsAdditionalInformationDelimiter"
    CONTAINS_TOPIC_FLAG = "containsTopicFlag"
    EMPTY_TOPIC_NOT_ALLOWED = "emptyTopicNotAllowed"
    EMPTY_WORD_NOT_ALLOWED = "emptyWordNotAllowed"
    EMPTY_TRANSLATION_NOT_ALLOWED = "emptyTranslationNotAllowed"
    ARTICLE_NOT_IN_CONFIG = "articleNotInConfig"


REASON_MESSAGES: dict[ValidationReason, str] = {
    ValidationReason.TRANSLATION_CONTAINS_COLUMN_DELIMITER: (
        'Translation contains forbidden column delimiter "{delimiter}"'
    ),
    ValidationReason.CONTAINS_COLUMN_DELIMITER: (
        'Contains forbidden column delimiter "{delimiter}"'
    ),
    ValidationReason.CONTAINS_ADDITIONAL_INFORMATION_DELIMITER: (
        'Contains forbidden additional information delimiter "{delimiter}"'
    ),
    ValidationReason.CONTAINS_TOPIC_FLAG: 'Contains forbidden topic flag "{topicFlag}"',
    ValidationReason.EMPTY_TOPIC_NOT_ALLOWED: "Empty topic is not allowed",
    ValidationReason.EMPTY_WORD_NOT_ALLOWED: "Empty word is not allowed",
    ValidationReason.EMPTY_TRANSLATION_NOT_ALLOWED: "Empty translation is not allowed",
    ValidationReason.ARTICLE_NOT_IN_CONFIG: (
        'Article "{article}" is not in configured articles'
    ),
}


class CellValidationResult(BaseModel):
    """Validity of one cell, with the reason when invalid."""

    is_valid: bool = Field(..., description="Whether the cell may be stored")
    reason_kind: Optional[ValidationReason] = Field(
        default=None, description="Failed rule, None when valid"
    )
    reason_params: dict[str, str] = Field(
        default_factory=dict, description="Values substituted into the message"
    )

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def message(self) -> str:
        if self.reason_kind is None:
            return ""
        return REASON_MESSAGES[self.reason_kind].format(**self.reason_params)


VALID = CellValidationResult(is_valid=True)


def _invalid(reason: ValidationReason, **params: str) -> CellValidationResult:
    return CellValidationResult(is_valid=False, reason_kind=reason, reason_params=params)


def _cell_text(column_id: str, row: WordRow) -> str:
    if column_id == COLUMN_ID_WORD:
        return row.value_from
    if column_id == COLUMN_ID_ARTICLE:
        return row.article
    if column_id == COLUMN_ID_ADDITIONAL_INFO:
        return row.additional_information
    return ""


def _validate_translations(
    translations: list[str], delimiter: str
) -> CellValidationResult:
    if not translations or any(not value.strip() for value in translations):
        return _invalid(ValidationReason.EMPTY_TRANSLATION_NOT_ALLOWED)
    if delimiter and any(delimiter in value for value in translations):
        return _invalid(
            ValidationReason.TRANSLATION_CONTAINS_COLUMN_DELIMITER, delimiter=delimiter
        )
    return VALID


def validate_cell(
    column_id: str,
    row: DictionaryRow,
    config: DictionaryConfig,
    value: Optional[str] = None,
) -> CellValidationResult:
    """Check one cell of a row against the active configuration.

    Args:
        column_id: ``word``, ``article``, ``additional-info`` or ``to-<language>``
        row: Row the cell belongs to
        config: Active configuration
        value: Text being entered; defaults to the row's current value.
            Translation columns always validate the row's translation list.

    Returns:
        CellValidationResult
    """
    if isinstance(row, TopicRow):
        if not row.label.strip():
            return _invalid(ValidationReason.EMPTY_TOPIC_NOT_ALLOWED)
        return VALID

    delimiter = resolve_token(config.delimiter)
    topic_flag = resolve_token(config.topic_flag)

    if column_id.startswith(TRANSLATION_COLUMN_PREFIX):
        language = column_id[len(TRANSLATION_COLUMN_PREFIX):]
        return _validate_translations(row.values_to.get(language, []), delimiter)

    text = _cell_text(column_id, row) if value is None else value

    if delimiter and delimiter in text:
        return _invalid(ValidationReason.CONTAINS_COLUMN_DELIMITER, delimiter=delimiter)

    if column_id == COLUMN_ID_ARTICLE:
        if topic_flag and text.startswith(topic_flag):
            return _invalid(ValidationReason.CONTAINS_TOPIC_FLAG, topicFlag=topic_flag)
        article = text.strip()
        allowed = {configured.strip() for configured in config.articles}
        if article and article not in allowed:
            return _invalid(ValidationReason.ARTICLE_NOT_IN_CONFIG, article=article)

    elif column_id == COLUMN_ID_WORD:
        additional_delimiter = resolve_token(config.additional_information_delimiter)
        if not text.strip():
            return _invalid(ValidationReason.EMPTY_WORD_NOT_ALLOWED)
        if additional_delimiter and additional_delimiter in text:
            return _invalid(
                ValidationReason.CONTAINS_ADDITIONAL_INFORMATION_DELIMITER,
                delimiter=additional_delimiter,
            )
        if topic_flag and topic_flag in text:
            return _invalid(ValidationReason.CONTAINS_TOPIC_FLAG, topicFlag=topic_flag)

    return VALID


def is_row_invalid(row: DictionaryRow, config: DictionaryConfig) -> bool:
    """True if any cell of the row fails validation."""
    if isinstance(row, TopicRow):
        return not row.label.strip()

    column_ids = [COLUMN_ID_WORD, COLUMN_ID_ARTICLE, COLUMN_ID_ADDITIONAL_INFO]
    column_ids.extend(
        f"{TRANSLATION_COLUMN_PREFIX}{language}" for language in config.languages_to
    )
    return any(
        not validate_cell(column_id, row, config).is_valid for column_id in column_ids
    )


def validate_config(config: DictionaryConfig) -> list[str]:
    """List configuration errors; an empty list means the config is usable.

    Args:
        config: Configuration to check

    Returns:
        Human-readable error descriptions
    """
    errors = []

    if not config.languages_to:
        errors.append("At least one target language is required")

    seen = set()
    duplicates = []
    for language in config.languages_to:
        if not language.strip():
            errors.append("Target language codes must not be blank")
        elif language in seen and language not in duplicates:
            duplicates.append(language)
        seen.add(language)
    if duplicates:
        errors.append(f"Duplicate target languages: {', '.join(duplicates)}")

    if not resolve_token(config.delimiter):
        errors.append("Column delimiter must not be empty")

    for error in errors:
        log.warning(f"Invalid dictionary config: {error}")
    return errors
