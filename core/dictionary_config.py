"""Dictionary file configuration with Pydantic validation."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DictionaryConfig(BaseModel):
    """Format-level settings of a dictionary file.

    Field aliases are the camelCase names used in autosave JSON
    (``languageFrom``, ``languagesTo``, ...). Instances are frozen: derive a
    new revision with ``model_copy(update=...)``.
    """

    language_from: str = Field(default="de", description="Source language code")
    languages_to: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Ordered target language codes (duplicates are a config error)",
    )
    articles: list[str] = Field(
        default_factory=lambda: ["die ", "das ", "der "],
        description="Allowed articles, trailing spaces are significant",
    )
    delimiter: str = Field(default="|", description="Column delimiter")
    additional_information_delimiter: str = Field(
        default=";", description="Separates the word from its annotation"
    )
    translation_delimiter: str = Field(
        default=";", description="Separates translations within one column"
    )
    topic_flag: str = Field(default="\t", description="Prefix of topic lines")
    topic_delimiter: str = Field(
        default="", description="Topic hierarchy separator (reserved)"
    )
    root_topic: str = Field(
        default="", description="Topic label for words before the first topic"
    )

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


DEFAULT_CONFIG = DictionaryConfig()


__all__ = ["DictionaryConfig", "DEFAULT_CONFIG"]
