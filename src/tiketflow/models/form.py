"""
Form schema models — the per-service field descriptors stored by the backend
in a category's ``form_schema`` / ``action_schema`` and in each workflow
action's ``require_form``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    BOOLEAN = "boolean"
    DATE = "date"
    SELECT = "select"


class FieldSchema(BaseModel):
    name: str
    label: str = ""
    type: FieldType = FieldType.TEXT
    required: bool = False
    options: list[str] = []
    placeholder: Optional[str] = None
    description: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("field name must not be empty")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_text(cls, v: Any) -> Any:
        # Renderers draw anything they don't recognise as a plain text input.
        if isinstance(v, str) and v not in FieldType._value2member_map_:
            logger.warning(f"Unknown field type {v!r}, treating as text")
            return FieldType.TEXT
        return v

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, v: Any) -> Any:
        # The admin schema builder may store options as "A, B, C".
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @property
    def display_label(self) -> str:
        return self.label or self.name


FieldSchemaList = list[FieldSchema]


def parse_schema(raw: Any) -> FieldSchemaList:
    """Parse a raw schema list, skipping entries that are not valid fields.

    ``None`` or a non-list yields an empty schema.
    """
    if not raw:
        return []
    if not isinstance(raw, list):
        logger.warning(f"Expected a list of fields, got {type(raw).__name__}")
        return []
    fields: FieldSchemaList = []
    for entry in raw:
        if isinstance(entry, FieldSchema):
            fields.append(entry)
            continue
        try:
            fields.append(FieldSchema.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping invalid field entry {entry!r}: {e.error_count()} error(s)")
    return fields
