"""Basic unit tests for the tiketflow package."""

from tiketflow import (
    AsyncTiketFlow,
    FormSession,
    TiketFlowError,
    ApiError,
    ConnectionError,
    SchemaViolation,
    TransitionRejected,
    SessionError,
    ControllerError,
    __version__,
)
from tiketflow.schema import FieldError


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert AsyncTiketFlow is not None
    assert FormSession is not None


def test_error_hierarchy():
    for cls in (ApiError, ConnectionError, SchemaViolation, TransitionRejected, SessionError, ControllerError):
        assert issubclass(cls, TiketFlowError)


def test_error_attributes():
    err = TiketFlowError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    err_with_details = SessionError("bad session", details={"id": "123"})
    assert err_with_details.code == "session_error"
    assert err_with_details.details == {"id": "123"}


def test_api_error_server_message():
    assert ApiError(422, {"message": "Tiket sudah ditutup"}).server_message == "Tiket sudah ditutup"
    assert ApiError(500, "<html>oops</html>").server_message is None
    assert ApiError(400, {"message": ""}).server_message is None
    assert ApiError(404, None).status == 404


def test_transition_rejected_defaults_to_generic_message():
    err = TransitionRejected()
    assert err.message == "Gagal memproses aksi"
    assert err.code == "transition_rejected"
    assert err.status is None


def test_schema_violation_carries_errors():
    errors = {"reason": FieldError("reason", "required", "Alasan wajib diisi")}
    err = SchemaViolation(errors)
    assert err.errors is errors
    assert "reason" in str(err)


def test_client_from_env(monkeypatch):
    monkeypatch.setenv("TIKETFLOW_API_BASE_URL", "https://helpdesk.example/api/")
    monkeypatch.setenv("TIKETFLOW_API_TIMEOUT", "5")
    client = AsyncTiketFlow.from_env()
    assert client.http.base_url == "https://helpdesk.example/api"
    assert client.http._client.timeout.read == 5.0


def test_client_from_env_defaults(monkeypatch):
    monkeypatch.delenv("TIKETFLOW_API_BASE_URL", raising=False)
    monkeypatch.delenv("TIKETFLOW_API_TIMEOUT", raising=False)
    client = AsyncTiketFlow.from_env(base_url="http://override/api")
    assert client.http.base_url == "http://override/api"
    assert client.http._client.timeout.read == 30.0
