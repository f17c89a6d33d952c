"""Configuration management for wordlist-editor."""

import codecs
import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.dictionary_config import DictionaryConfig
from core.token_codec import resolve_token

log = logging.getLogger("wordlisteditor.config")


class AppSettings(BaseModel):
    """Application settings with validation."""

    # Fallback dictionary settings for files without a header line
    language_from: str = Field(default="de", min_length=1, description="Source language")
    languages_to: str = Field(
        default="en", description="Comma-separated target language codes"
    )
    articles: list[str] = Field(
        default_factory=lambda: ["die ", "das ", "der "],
        description="Allowed articles (trailing spaces are kept)",
    )
    delimiter: str = Field(
        default="|", min_length=1, description="Column delimiter (escaped form)"
    )
    additional_information_delimiter: str = Field(
        default=";", description="Word/annotation separator (escaped form)"
    )
    translation_delimiter: str = Field(
        default=";", description="Separator between translations (escaped form)"
    )
    topic_flag: str = Field(
        default="\\t", description="Topic line prefix (escaped form)"
    )
    topic_delimiter: str = Field(default="", description="Topic hierarchy separator")
    root_topic: str = Field(default="", description="Default topic label")

    file_encoding: str = Field(
        default="utf-8", description="Encoding used to read and write dictionary files"
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("languages_to")
    @classmethod
    def validate_languages_to(cls, v):
        """Require at least one language code."""
        if not [item for item in v.split(",") if item.strip()]:
            raise ValueError("languages_to must name at least one language")
        return v

    @field_validator("file_encoding")
    @classmethod
    def validate_file_encoding(cls, v):
        """Only accept encodings Python can read files with."""
        try:
            return codecs.lookup(v).name
        except LookupError as e:
            raise ValueError(f"unknown encoding {v!r}") from e


class Config:
    """Configuration manager using SQLite for persistence with Pydantic validation."""

    def __init__(self, db_path: Path):
        """Initialize config with database connection.

        Args:
            db_path: Path to SQLite database
        """
        self.db_path = db_path
        self._init_settings_table()
        self._ensure_defaults()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and always close it."""
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_settings_table(self) -> None:
        """Create settings table if not exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def _ensure_defaults(self) -> None:
        """Ensure all default settings exist in database."""
        defaults = AppSettings().model_dump()

        with self._get_connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    """
                    INSERT OR IGNORE INTO settings (key, value)
                    VALUES (?, ?)
                """,
                    (key, self._serialize_value(value)),
                )

    def _serialize_value(self, value: Any) -> str:
        """Convert value to string for storage."""
        if isinstance(value, (list, dict)):
            return json.dumps(value)
        return str(value)

    def _simple_parse(self, value: str) -> Any:
        """Simple fallback parsing without pydantic."""
        # Try JSON first (for lists/dicts)
        if value.startswith("[") or value.startswith("{"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        return value

    def _parse_known(self, key: str, raw_value: str) -> Any:
        """Parse a stored value, keeping text settings as text."""
        if AppSettings.model_fields[key].annotation is str:
            return raw_value
        parsed = self._simple_parse(raw_value)
        try:
            return getattr(AppSettings(**{key: parsed}), key)
        except ValueError as e:
            log.warning(f"Stored value for {key} is invalid ({e}), using default")
            return getattr(AppSettings(), key)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get configuration value.

        Args:
            key: Setting key
            default: Default value if not found

        Returns:
            Setting value
        """
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT value FROM settings WHERE key = ?", (key,))
            result = cursor.fetchone()

        if result:
            if key in AppSettings.model_fields:
                return self._parse_known(key, result[0])
            return self._simple_parse(result[0])
        if default is not None:
            return default
        # Fall back to AppSettings default if key exists
        if key in AppSettings.model_fields:
            return getattr(AppSettings(), key)
        return None

    def set(self, key: str, value: Any) -> None:
        """Set configuration value with pydantic validation.

        Args:
            key: Setting key
            value: Setting value

        Raises:
            ValueError: If value fails validation
        """
        if key in AppSettings.model_fields:
            # Text from the command line, e.g. a JSON list for articles
            if isinstance(value, str) and AppSettings.model_fields[key].annotation is not str:
                value = self._simple_parse(value)
            try:
                validated = AppSettings(**{key: value})
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {e}") from e
            value = getattr(validated, key)

        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO settings (key, value)
                VALUES (?, ?)
            """,
                (key, self._serialize_value(value)),
            )

    def get_all(self) -> dict[str, Any]:
        """Get all settings as dictionary."""
        with self._get_connection() as conn:
            rows = conn.execute("SELECT key, value FROM settings").fetchall()
        return {
            key: self._parse_known(key, value)
            if key in AppSettings.model_fields
            else self._simple_parse(value)
            for key, value in rows
        }

    def get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Get list configuration value from comma-separated string.

        Args:
            key: Setting key
            default: Default value if not found

        Returns:
            List of strings
        """
        value = self.get(key, default)
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            if value.strip():
                return [item.strip() for item in value.split(",") if item.strip()]
            return []
        if default is not None:
            return default
        return []

    def fallback_dictionary_config(self) -> DictionaryConfig:
        """Build the configuration used for files without a header line.

        Delimiter settings are stored escaped (``\\t`` for a tab) and are
        resolved here.
        """
        return DictionaryConfig(
            language_from=self.get("language_from"),
            languages_to=self.get_list("languages_to"),
            articles=self.get("articles"),
            delimiter=resolve_token(self.get("delimiter")),
            additional_information_delimiter=resolve_token(
                self.get("additional_information_delimiter")
            ),
            translation_delimiter=resolve_token(self.get("translation_delimiter")),
            topic_flag=resolve_token(self.get("topic_flag")),
            topic_delimiter=resolve_token(self.get("topic_delimiter")),
            root_topic=self.get("root_topic"),
        )
