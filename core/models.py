"""Pydantic models for wordlist-editor data structures."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.dictionary_config import DictionaryConfig

ROW_TYPE_TOPIC = "topic"
ROW_TYPE_WORD = "word"

_ROW_MODEL_CONFIG = ConfigDict(
    extra="ignore", alias_generator=to_camel, populate_by_name=True
)


class TopicRow(BaseModel):
    """Section header between word rows."""

    type: Literal["topic"] = Field(default=ROW_TYPE_TOPIC, description="Row kind")
    label: str = Field(default="", description="Topic label (may be empty)")

    model_config = _ROW_MODEL_CONFIG


class WordRow(BaseModel):
    """Vocabulary entry with per-language translations."""

    type: Literal["word"] = Field(default=ROW_TYPE_WORD, description="Row kind")
    article: str = Field(default="", description="Article, empty for none")
    value_from: str = Field(default="", description="Source word")
    additional_information: str = Field(
        default="", description="Free-form annotation"
    )
    values_to: dict[str, list[str]] = Field(
        default_factory=dict, description="Translations per target language"
    )
    topic: Optional[str] = Field(
        default=None, description="Topic assigned by the caller, never by the codec"
    )

    model_config = _ROW_MODEL_CONFIG


DictionaryRow = Annotated[Union[TopicRow, WordRow], Field(discriminator="type")]


class ParseResult(BaseModel):
    """Configuration and rows read from a dictionary file."""

    config: DictionaryConfig = Field(..., description="Effective configuration")
    rows: list[DictionaryRow] = Field(default_factory=list, description="Parsed rows")

    model_config = ConfigDict(extra="ignore")


class RenamePair(BaseModel):
    """Rename of one target language column."""

    from_language: str = Field(..., alias="from", description="Current language key")
    to_language: str = Field(..., alias="to", description="New language key")

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class LanguageChangeResult(BaseModel):
    """Outcome of a column add/remove/rename request.

    On failure ``config`` and ``rows`` are the unchanged inputs and ``error``
    names the reason.
    """

    ok: bool = Field(..., description="Whether the change was applied")
    error: Optional[str] = Field(default=None, description="Failure reason key")
    error_params: dict[str, str] = Field(
        default_factory=dict, description="Parameters for the failure message"
    )
    config: DictionaryConfig = Field(..., description="Resulting configuration")
    rows: list[DictionaryRow] = Field(default_factory=list, description="Resulting rows")

    model_config = ConfigDict(extra="ignore")


def create_empty_word_row(
    config: DictionaryConfig, topic: Optional[str] = None
) -> WordRow:
    """Create a blank word row with one empty list per target language."""
    return WordRow(
        values_to={language: [] for language in config.languages_to}, topic=topic
    )


def create_topic_row(label: str) -> TopicRow:
    return TopicRow(label=label)
