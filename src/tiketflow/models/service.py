"""
Service directory models — categories carry the schemas, resources back bookings,
roles receive transferred tickets.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, field_validator

from tiketflow.models.form import FieldSchemaList, parse_schema

ServiceType = Literal["booking", "service", "request"]


class ServiceCategory(BaseModel):
    id: str
    name: str = ""
    slug: str = ""
    type: ServiceType = "service"
    icon: Optional[str] = None
    description: Optional[str] = None
    form_schema: FieldSchemaList = []
    action_schema: FieldSchemaList = []
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("form_schema", "action_schema", mode="before")
    @classmethod
    def _parse_schema(cls, v: Any) -> FieldSchemaList:
        return parse_schema(v)

    @property
    def is_booking(self) -> bool:
        return self.type == "booking"


class Resource(BaseModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    capacity: Optional[int] = None
    meta_data: Optional[dict[str, Any]] = None
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class Role(BaseModel):
    """A unit a ticket can be handed over to; ``code`` is what the backend expects."""

    id: str
    code: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
