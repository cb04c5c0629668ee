"""
tiketflow — schema-driven forms and workflow actions for the ticketing backend.

Binds backend-defined field schemas to validated submission payloads and
drives ticket workflow transitions over REST.
"""

from tiketflow.client import AsyncTiketFlow
from tiketflow.catalog import ActionCatalog
from tiketflow.controller import ActionExecutionController, ControllerState, Notice
from tiketflow.forms import FormSession, FormStatus, ValidationResult
from tiketflow.schema import BoundSlot, FieldError, interpret
from tiketflow.models.form import FieldSchema, FieldSchemaList, FieldType, parse_schema
from tiketflow.models.workflow import WorkflowAction
from tiketflow.models.service import Resource, Role, ServiceCategory
from tiketflow.errors import (
    TiketFlowError,
    ApiError,
    ConnectionError,
    SchemaViolation,
    TransitionRejected,
    SessionError,
    ControllerError,
)

__version__ = "0.1.0"
__all__ = [
    "AsyncTiketFlow",
    "ActionCatalog",
    "ActionExecutionController",
    "ControllerState",
    "Notice",
    "FormSession",
    "FormStatus",
    "ValidationResult",
    "BoundSlot",
    "FieldError",
    "interpret",
    "FieldSchema",
    "FieldSchemaList",
    "FieldType",
    "parse_schema",
    "WorkflowAction",
    "Resource",
    "Role",
    "ServiceCategory",
    "TiketFlowError",
    "ApiError",
    "ConnectionError",
    "SchemaViolation",
    "TransitionRejected",
    "SessionError",
    "ControllerError",
]
