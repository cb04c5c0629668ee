"""
Workflow models — actions offered by the workflow authority for one ticket.
"""

from typing import Any

from pydantic import BaseModel, field_validator

from tiketflow.models.form import FieldSchemaList, parse_schema


class WorkflowAction(BaseModel):
    id: str
    label: str = ""
    variant: str = "default"
    require_form: FieldSchemaList = []

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("variant", mode="before")
    @classmethod
    def _default_variant(cls, v: Any) -> Any:
        return v or "default"

    @field_validator("require_form", mode="before")
    @classmethod
    def _parse_form(cls, v: Any) -> FieldSchemaList:
        return parse_schema(v)

    @property
    def needs_form(self) -> bool:
        return len(self.require_form) > 0
