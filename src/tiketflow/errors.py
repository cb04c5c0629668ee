"""
tiketflow error types.

Local errors (SchemaViolation) stay inside a form; remote errors
(TransitionRejected, ApiError) carry what the workflow authority said.
"""

from typing import Any, Optional

GENERIC_FAILURE_MESSAGE = "Gagal memproses aksi"


class TiketFlowError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class ApiError(TiketFlowError):
    """Non-2xx response from the backend."""

    def __init__(self, status: int, body: Any = None):
        super().__init__("http_error", f"HTTP {status}", {"status": status, "body": body})
        self.status = status
        self.body = body

    @property
    def server_message(self) -> Optional[str]:
        """The backend's own message (Laravel-style ``{"message": ...}``), if any."""
        if isinstance(self.body, dict):
            message = self.body.get("message")
            if isinstance(message, str) and message:
                return message
        return None


class ConnectionError(TiketFlowError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)


class SchemaViolation(TiketFlowError):
    """Required fields are missing; submission was blocked locally."""

    def __init__(self, errors: dict[str, Any]):
        names = ", ".join(errors)
        super().__init__("schema_violation", f"Invalid fields: {names}", {"errors": errors})
        self.errors = errors


class TransitionRejected(TiketFlowError):
    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE, status: Optional[int] = None):
        super().__init__("transition_rejected", message, {"status": status} if status else None)
        self.status = status


class SessionError(TiketFlowError):
    def __init__(self, message: str, code: str = "session_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ControllerError(TiketFlowError):
    def __init__(self, message: str, state: Optional[str] = None):
        super().__init__("controller_error", message, {"state": state} if state else None)
        self.state = state
