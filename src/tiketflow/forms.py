"""
Form session — the in-progress state of one open form.

A session owns a working copy of the submission payload, the current field
errors and the submission status:

    idle -> validating -> submitting -> succeeded
                 |             |
                 +-> failed <--+

A failed session keeps its payload so the user can correct it and submit
again. Nothing here is global: each view holds its own session.
"""

import copy
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from tiketflow.errors import SchemaViolation, SessionError
from tiketflow.models.form import FieldSchemaList
from tiketflow.schema import BoundSlot, FieldError, interpret

logger = logging.getLogger(__name__)

SubmitFn = Callable[[dict[str, Any]], Awaitable[Any]]


class FormStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ValidationResult:
    __slots__ = ("errors",)

    def __init__(self, errors: dict[str, FieldError]):
        self.errors = errors

    @property
    def ok(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        return f"ValidationResult(ok={self.ok}, errors={list(self.errors)})"


class FormSession:
    def __init__(
        self,
        schema: Optional[FieldSchemaList] = None,
        prefix: str = "",
        initial_values: Optional[dict[str, Any]] = None,
        extra_fields: Optional[FieldSchemaList] = None,
    ):
        self.prefix = prefix
        self.payload: dict[str, Any] = copy.deepcopy(initial_values) if initial_values else {}
        self.errors: dict[str, FieldError] = {}
        self.status = FormStatus.IDLE
        self.last_error: Optional[BaseException] = None
        self._closed = False

        # Static root fields first, then the dynamic schema, in display order.
        # A field is addressed by its name, or by its full key when a field at
        # another path already took the name.
        self._slots: dict[str, BoundSlot] = {}
        for slot in interpret(extra_fields, "") + interpret(schema, prefix):
            handle = slot.name if slot.name not in self._slots else slot.key
            if handle in self._slots:
                logger.warning(f"Field {slot.key!r} is already bound, skipping")
                continue
            self._slots[handle] = slot

    @property
    def slots(self) -> list[BoundSlot]:
        return list(self._slots.values())

    @property
    def names(self) -> list[str]:
        """The name each field is addressed by, in display order."""
        return list(self._slots)

    @property
    def closed(self) -> bool:
        return self._closed

    def slot(self, name: str) -> BoundSlot:
        """Look a field up by its name or its full payload key."""
        return self._slots[self._handle(name)]

    def _handle(self, name: str) -> str:
        if name in self._slots:
            return name
        for handle, slot in self._slots.items():
            if slot.key == name:
                return handle
        raise KeyError(f"No field named {name!r} in this form")

    def get_value(self, name: str) -> Any:
        return self.slot(name).read(self.payload)

    def set_value(self, name: str, raw: Any) -> Any:
        """Coerce ``raw`` for field ``name``, store it and clear the field's error.

        Returns the stored value.
        """
        self._ensure_open()
        handle = self._handle(name)
        value = self._slots[handle].write(self.payload, raw)
        self.errors.pop(handle, None)
        return value

    def set_extra(self, key: str, value: Any) -> None:
        """Set a top-level payload key that is not part of the schema."""
        self._ensure_open()
        self.payload[key] = value

    def validate(self) -> ValidationResult:
        errors: dict[str, FieldError] = {}
        for handle, slot in self._slots.items():
            error = slot.validate(self.payload)
            if error is not None:
                errors[handle] = error
        self.errors = errors
        return ValidationResult(dict(errors))

    async def submit(self, submit_fn: SubmitFn) -> Any:
        """Validate, then hand a copy of the payload to ``submit_fn`` once.

        Raises SchemaViolation when validation fails, SessionError when a
        submission is already running or the session is closed. Errors from
        ``submit_fn`` are re-raised after the session is marked failed.
        """
        self._ensure_open()
        if self.status == FormStatus.SUBMITTING:
            raise SessionError("Form is already being submitted", code="already_submitting")

        self.status = FormStatus.VALIDATING
        result = self.validate()
        if not result.ok:
            self.status = FormStatus.FAILED
            raise SchemaViolation(result.errors)

        self.status = FormStatus.SUBMITTING
        self.last_error = None
        try:
            outcome = await submit_fn(copy.deepcopy(self.payload))
        except Exception as e:
            self.status = FormStatus.FAILED
            self.last_error = e
            raise
        self.status = FormStatus.SUCCEEDED
        return outcome

    def close(self) -> None:
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionError("Form session is closed", code="session_closed")

    def __repr__(self) -> str:
        return f"FormSession(prefix={self.prefix!r}, status={self.status.value!r}, fields={list(self._slots)})"
