"""
AsyncTiketFlow — main client.
"""

import os
from typing import Any, Callable, Optional

import httpx

from tiketflow.catalog import ActionCatalog
from tiketflow.controller import ActionExecutionController, Notice
from tiketflow.services import ServicesAPI
from tiketflow.tickets import TicketsAPI
from tiketflow.transport.http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, HttpClient
from tiketflow.workflow import WorkflowAPI

ENV_BASE_URL = "TIKETFLOW_API_BASE_URL"
ENV_TIMEOUT = "TIKETFLOW_API_TIMEOUT"
ENV_TOKEN = "TIKETFLOW_TOKEN"


class AsyncTiketFlow:
    """Async client for the ticketing backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.http = HttpClient(base_url=base_url, token=token, timeout=timeout, transport=transport)
        self.workflow = WorkflowAPI(self.http)
        self.services = ServicesAPI(self.http)
        self.tickets = TicketsAPI(self.http)
        self.catalog = ActionCatalog(self.workflow)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AsyncTiketFlow":
        """Build a client from TIKETFLOW_* environment variables.

        A timeout of 0 (or none set) means the default timeout.
        """
        timeout = float(os.environ.get(ENV_TIMEOUT) or 0) or DEFAULT_TIMEOUT_S
        kwargs.setdefault("base_url", os.environ.get(ENV_BASE_URL) or DEFAULT_BASE_URL)
        kwargs.setdefault("token", os.environ.get(ENV_TOKEN))
        kwargs.setdefault("timeout", timeout)
        return cls(**kwargs)

    def action_controller(
        self,
        ticket_id: str,
        on_update: Optional[Callable[[], Any]] = None,
        notify: Optional[Callable[[Notice], None]] = None,
    ) -> ActionExecutionController:
        """A controller for one ticket view. Call ``refresh()`` to load its actions."""
        return ActionExecutionController(
            ticket_id, self.workflow, self.catalog, on_update=on_update, notify=notify,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncTiketFlow":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
