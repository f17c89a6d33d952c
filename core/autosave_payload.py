"""JSON snapshot of the editor state used for crash recovery."""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from core.dictionary_config import DictionaryConfig
from core.models import DictionaryRow

log = logging.getLogger("wordlisteditor.autosave_payload")


class AutosavePayload(BaseModel):
    """Unsaved document state: configuration, rows and source file path."""

    config: DictionaryConfig = Field(..., description="Active configuration")
    rows: list[DictionaryRow] = Field(..., description="Rows being edited")
    file_path: Optional[str] = Field(
        default=None, description="File the document was opened from"
    )

    model_config = ConfigDict(
        extra="ignore", alias_generator=to_camel, populate_by_name=True
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def normalize_file_path(cls, v: Any) -> Optional[str]:
        """Treat any non-string path as missing."""
        return v if isinstance(v, str) else None


def parse_autosave_payload(content: str) -> Optional[AutosavePayload]:
    """Read an autosave snapshot.

    Args:
        content: JSON text written by ``build_autosave_payload``

    Returns:
        AutosavePayload, or None if the content is not a usable snapshot
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        log.warning(f"Autosave payload is not valid JSON: {e}")
        return None

    if not isinstance(data, dict) or not isinstance(data.get("rows"), list):
        log.warning("Autosave payload has no rows list")
        return None
    if not isinstance(data.get("config"), dict):
        log.warning("Autosave payload has no config object")
        return None

    try:
        return AutosavePayload.model_validate(data)
    except ValidationError as e:
        log.warning(f"Autosave payload failed validation: {e}")
        return None


def build_autosave_payload(
    config: DictionaryConfig,
    rows: list[DictionaryRow],
    file_path: Optional[str] = None,
) -> str:
    """Serialize the editor state to camelCase JSON."""
    payload = AutosavePayload(config=config, rows=rows, file_path=file_path)
    return payload.model_dump_json(by_alias=True)
