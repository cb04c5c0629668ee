"""
Schema interpreter — turns a field schema into bound, validated slots.

Each field type has one FieldKind that knows how to coerce raw input, how to
display a stored value, and which rule the value must satisfy. A BoundSlot
pairs a field with its kind and its path inside the submission payload:

    {"title": "...", "ticket_data": {"alasan": "...", "jumlah": 5}}
                      ^ prefix        ^ field.name

``None`` is the single "unset" value for every kind. Empty number input,
unparseable number input and a select value outside the options all store
``None``; required fields treat it as missing.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Optional

from tiketflow.models.form import FieldSchema, FieldSchemaList, FieldType

logger = logging.getLogger(__name__)

UNSET = None

TRUE_STRINGS = {"true", "1", "yes", "y", "on", "ya"}
FALSE_STRINGS = {"false", "0", "no", "n", "off", "tidak", ""}


class FieldError:
    __slots__ = ("field", "kind", "message")

    def __init__(self, field: str, kind: str, message: str):
        self.field = field
        self.kind = kind
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldError):
            return NotImplemented
        return (self.field, self.kind, self.message) == (other.field, other.kind, other.message)

    def __repr__(self) -> str:
        return f"FieldError(field={self.field!r}, kind={self.kind!r}, message={self.message!r})"


def is_missing(value: Any) -> bool:
    return value is None or value == ""


# --- kinds -----------------------------------------------------------------

class FieldKind:
    """Base kind: literal values, required check on missing values."""

    type: FieldType = FieldType.TEXT
    widget = "input"
    default_placeholder: Optional[str] = None

    def coerce(self, field: FieldSchema, raw: Any) -> Any:
        return raw

    def display(self, field: FieldSchema, value: Any) -> str:
        return "" if value is None else str(value)

    def placeholder(self, field: FieldSchema) -> str:
        return field.placeholder or self.default_placeholder or field.display_label

    def is_required(self, field: FieldSchema) -> bool:
        return field.required

    def validate(self, field: FieldSchema, value: Any) -> Optional[FieldError]:
        if self.is_required(field) and is_missing(value):
            return FieldError(field.name, "required", f"{field.display_label} wajib diisi")
        return None


class TextKind(FieldKind):
    type = FieldType.TEXT

    def coerce(self, field: FieldSchema, raw: Any) -> Any:
        if raw is None:
            return UNSET
        # no trimming: the literal input is what gets stored
        return raw if isinstance(raw, str) else str(raw)


class TextareaKind(TextKind):
    type = FieldType.TEXTAREA
    widget = "textarea"
    default_placeholder = "Isi detail..."


class NumberKind(FieldKind):
    type = FieldType.NUMBER
    widget = "number"
    default_placeholder = "0"

    def coerce(self, field: FieldSchema, raw: Any) -> Any:
        if raw is None or isinstance(raw, bool):
            return UNSET
        if isinstance(raw, (int, float)):
            number = float(raw)
        else:
            text = str(raw).strip()
            if not text:
                return UNSET
            try:
                number = float(text)
            except ValueError:
                logger.debug(f"Field {field.name!r}: {raw!r} is not a number, storing unset")
                return UNSET
        if not math.isfinite(number):
            return UNSET
        # 42.0 goes over the wire as 42, matching JSON numbers from the browser
        return int(number) if number.is_integer() else number


class BooleanKind(FieldKind):
    type = FieldType.BOOLEAN
    widget = "switch"

    def coerce(self, field: FieldSchema, raw: Any) -> Any:
        if raw is None or isinstance(raw, bool):
            return raw
        if isinstance(raw, (int, float)):
            return raw != 0
        text = str(raw).strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        return UNSET

    def display(self, field: FieldSchema, value: Any) -> str:
        return "Ya / Setuju" if value else "Tidak"

    def is_required(self, field: FieldSchema) -> bool:
        # Legacy schemas flag checkboxes as required; an unchecked box is a valid answer.
        return False


class DateKind(FieldKind):
    type = FieldType.DATE
    widget = "date"
    default_placeholder = "Pilih tanggal"

    def coerce(self, field: FieldSchema, raw: Any) -> Any:
        if raw is None:
            return UNSET
        if isinstance(raw, datetime):
            return raw.date().isoformat()
        if isinstance(raw, date):
            return raw.isoformat()
        text = str(raw).strip()
        if not text:
            return UNSET
        parsed = _parse_iso_date(text)
        if parsed is None:
            logger.debug(f"Field {field.name!r}: {raw!r} is not an ISO date, storing unset")
            return UNSET
        return parsed.isoformat()

    def display(self, field: FieldSchema, value: Any) -> str:
        if not value:
            return ""
        parsed = _parse_iso_date(str(value))
        return parsed.strftime("%d %B %Y") if parsed else str(value)


class SelectKind(FieldKind):
    type = FieldType.SELECT
    widget = "select"
    default_placeholder = "Pilih salah satu"

    def coerce(self, field: FieldSchema, raw: Any) -> Any:
        if raw is None:
            return UNSET
        value = raw if isinstance(raw, str) else str(raw)
        if value not in field.options:
            if value:
                logger.debug(f"Field {field.name!r}: {value!r} is not one of {field.options}")
            return UNSET
        return value

    def validate(self, field: FieldSchema, value: Any) -> Optional[FieldError]:
        if field.required and not field.options:
            return FieldError(field.name, "no_options", f"{field.display_label} tidak memiliki pilihan")
        return super().validate(field, value)


KINDS: dict[FieldType, FieldKind] = {
    kind.type: kind
    for kind in (TextKind(), TextareaKind(), NumberKind(), BooleanKind(), DateKind(), SelectKind())
}


def _parse_iso_date(text: str) -> Optional[date]:
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


# --- payload paths -----------------------------------------------------------

def field_path(prefix: str, name: str) -> tuple[str, ...]:
    parts = tuple(p for p in prefix.split(".") if p) if prefix else ()
    return parts + (name,)


def read_path(payload: dict[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def write_path(payload: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    node = payload
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value


# --- binding -----------------------------------------------------------------

class BoundSlot:
    """One field bound to its payload path."""

    __slots__ = ("field", "prefix", "path", "kind")

    def __init__(self, field: FieldSchema, prefix: str = ""):
        self.field = field
        self.prefix = prefix
        self.path = field_path(prefix, field.name)
        self.kind = KINDS[field.type]

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def key(self) -> str:
        return ".".join(self.path)

    @property
    def widget(self) -> str:
        return self.kind.widget

    @property
    def required(self) -> bool:
        return self.kind.is_required(self.field)

    @property
    def placeholder(self) -> str:
        return self.kind.placeholder(self.field)

    def read(self, payload: dict[str, Any]) -> Any:
        return read_path(payload, self.path)

    def write(self, payload: dict[str, Any], raw: Any) -> Any:
        value = self.kind.coerce(self.field, raw)
        write_path(payload, self.path, value)
        return value

    def display(self, payload: dict[str, Any]) -> str:
        return self.kind.display(self.field, self.read(payload))

    def validate(self, payload: dict[str, Any]) -> Optional[FieldError]:
        return self.kind.validate(self.field, self.read(payload))

    def __repr__(self) -> str:
        return f"BoundSlot(key={self.key!r}, type={self.field.type.value!r})"


def interpret(schema: Optional[FieldSchemaList], prefix: str = "") -> list[BoundSlot]:
    """Bind every field of ``schema`` under ``prefix``, in schema order.

    An empty or missing schema binds nothing. When two fields share a name
    only the first is bound.
    """
    slots: list[BoundSlot] = []
    seen: set[str] = set()
    for field in schema or []:
        if field.name in seen:
            logger.warning(f"Duplicate field name {field.name!r} in schema, keeping the first")
            continue
        seen.add(field.name)
        slots.append(BoundSlot(field, prefix))
    return slots
