"""
Ticket creation, resolution and transfer forms.

Creation and resolution combine a few static fields at the payload root with
the service category's own schema nested under a prefix; transfer has static
fields only:

    creation:   {"title", "priority", "description", [booking keys], "ticket_data": {...}}
    resolution: {"notes", "action_data": {...}}
    transfer:   {"to_role", "notes"}
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from tiketflow.forms import FormSession
from tiketflow.models.form import FieldSchema, FieldType
from tiketflow.models.service import Resource, Role, ServiceCategory
from tiketflow.schema import read_path, write_path
from tiketflow.transport.http import HttpClient

TICKET_DATA_PREFIX = "ticket_data"
ACTION_DATA_PREFIX = "action_data"
BOOKING_KEYS = ("resource_id", "start_date", "end_date")
PRIORITIES = ["low", "medium", "high"]
DEFAULT_PRIORITY = "medium"

TITLE_FIELD = FieldSchema(name="title", label="Judul", type=FieldType.TEXT, required=True)
PRIORITY_FIELD = FieldSchema(name="priority", label="Prioritas", type=FieldType.SELECT, options=PRIORITIES)
DESCRIPTION_FIELD = FieldSchema(name="description", label="Deskripsi", type=FieldType.TEXTAREA, required=True)
NOTES_FIELD = FieldSchema(
    name="notes", label="Catatan Pengerjaan", type=FieldType.TEXTAREA,
    placeholder="Jelaskan apa yang telah dikerjakan...",
)
TRANSFER_NOTES_FIELD = FieldSchema(
    name="notes", label="Alasan", type=FieldType.TEXTAREA, required=True,
    placeholder="Contoh: Mohon cek ketersediaan sparepart...",
)


def _booking_fields(resources: list[Resource]) -> list[FieldSchema]:
    return [
        FieldSchema(name="start_date", label="Tanggal Mulai", type=FieldType.DATE, required=True),
        FieldSchema(name="end_date", label="Tanggal Selesai", type=FieldType.DATE, required=True),
        FieldSchema(
            name="resource_id", label="Unit", type=FieldType.SELECT, required=True,
            options=[r.id for r in resources if r.is_active],
        ),
    ]


def creation_form(
    category: ServiceCategory,
    resources: Optional[list[Resource]] = None,
    prefix: str = TICKET_DATA_PREFIX,
    initial_values: Optional[dict[str, Any]] = None,
) -> FormSession:
    """Form for opening a ticket in ``category``.

    Booking categories also ask for a date window and one of ``resources``.
    ``initial_values`` pre-fills the form when editing an existing ticket.
    """
    extra = [TITLE_FIELD, PRIORITY_FIELD, DESCRIPTION_FIELD]
    if category.is_booking:
        extra += _booking_fields(resources or [])

    values = copy.deepcopy(initial_values) if initial_values else {}
    values.setdefault("priority", DEFAULT_PRIORITY)
    path = tuple(p for p in prefix.split(".") if p)
    if path and not isinstance(read_path(values, path), dict):
        write_path(values, path, {})
    return FormSession(category.form_schema, prefix=prefix, initial_values=values, extra_fields=extra)


def resolution_form(category: ServiceCategory) -> FormSession:
    """Form for closing a ticket: free-form notes plus the category's report fields."""
    return FormSession(
        category.action_schema,
        prefix=ACTION_DATA_PREFIX,
        initial_values={"notes": "", ACTION_DATA_PREFIX: {}},
        extra_fields=[NOTES_FIELD],
    )


def transfer_form(roles: list[Role]) -> FormSession:
    """Form for handing a ticket over to another role, with the reason why."""
    to_role = FieldSchema(
        name="to_role", label="Tujuan", type=FieldType.SELECT, required=True,
        placeholder="Pilih Role Tujuan", options=[r.code for r in roles],
    )
    return FormSession(extra_fields=[to_role, TRANSFER_NOTES_FIELD])


def build_ticket_payload(category: ServiceCategory, payload: dict[str, Any]) -> dict[str, Any]:
    """Add the category keys the backend needs to recognise the ticket type."""
    data = copy.deepcopy(payload)
    data["service_category_id"] = category.id
    data["type"] = category.slug
    data["priority"] = data.get("priority") or DEFAULT_PRIORITY
    if not category.is_booking:
        for key in BOOKING_KEYS:
            data[key] = None
    return data


class TicketsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def create(self, payload: dict[str, Any]) -> Any:
        return await self._http.post("/tickets", payload)

    async def resolve(self, ticket_id: str, payload: dict[str, Any]) -> Any:
        return await self._http.post(f"/tickets/{ticket_id}/resolve", payload)

    async def transfer(self, ticket_id: str, payload: dict[str, Any]) -> Any:
        return await self._http.post(f"/tickets/{ticket_id}/transfer", payload)

    async def submit_new(self, session: FormSession, category: ServiceCategory) -> Any:
        """Validate ``session`` and create the ticket from it."""
        async def _send(payload: dict[str, Any]) -> Any:
            return await self.create(build_ticket_payload(category, payload))
        return await session.submit(_send)

    async def submit_resolution(self, session: FormSession, ticket_id: str) -> Any:
        """Validate ``session`` and resolve the ticket with it."""
        async def _send(payload: dict[str, Any]) -> Any:
            return await self.resolve(ticket_id, {
                "notes": payload.get("notes") or "",
                ACTION_DATA_PREFIX: payload.get(ACTION_DATA_PREFIX) or {},
            })
        return await session.submit(_send)

    async def submit_transfer(self, session: FormSession, ticket_id: str) -> Any:
        async def _send(payload: dict[str, Any]) -> Any:
            return await self.transfer(ticket_id, {"to_role": payload.get("to_role"), "notes": payload.get("notes")})
        return await session.submit(_send)
