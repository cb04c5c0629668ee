"""
Workflow action catalog — the per-ticket list of actions a viewer may run.

Loading never raises: when the list cannot be fetched the ticket simply has
no actions. Each fetch is tagged with the ticket's version at the time it was
issued; ``invalidate()`` bumps the version so a response that was in flight
during a transition cannot overwrite fresher state.
"""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from tiketflow.errors import TiketFlowError
from tiketflow.models.workflow import WorkflowAction
from tiketflow.workflow import WorkflowAPI

logger = logging.getLogger(__name__)


class ActionCatalog:
    def __init__(self, workflow: WorkflowAPI):
        self._workflow = workflow
        self._actions: dict[str, list[WorkflowAction]] = {}
        self._versions: dict[str, int] = {}
        self._in_flight: dict[str, asyncio.Future[list[WorkflowAction]]] = {}
        self._holders: dict[str, int] = {}

    def actions(self, ticket_id: str) -> list[WorkflowAction]:
        """Last accepted action list for the ticket (empty if never loaded)."""
        return list(self._actions.get(ticket_id, []))

    def version(self, ticket_id: str) -> int:
        return self._versions.get(ticket_id, 0)

    def invalidate(self, ticket_id: str) -> None:
        """Mark the ticket's state as changed; responses already in flight become stale."""
        self._versions[ticket_id] = self.version(ticket_id) + 1
        self._in_flight.pop(ticket_id, None)

    def retain(self, ticket_id: str) -> None:
        """Register a view showing the ticket."""
        self._holders[ticket_id] = self._holders.get(ticket_id, 0) + 1

    def release(self, ticket_id: str) -> None:
        """Unregister a view. The last one to go drops everything kept for the ticket."""
        count = self._holders.get(ticket_id, 0) - 1
        if count > 0:
            self._holders[ticket_id] = count
            return
        self._holders.pop(ticket_id, None)
        self._actions.pop(ticket_id, None)
        self._versions.pop(ticket_id, None)
        self._in_flight.pop(ticket_id, None)

    async def load_actions(self, ticket_id: str) -> list[WorkflowAction]:
        """Fetch the ticket's actions. A load already in flight for it is joined."""
        pending = self._in_flight.get(ticket_id)
        if pending is None:
            version = self._versions.setdefault(ticket_id, 0)
            pending = asyncio.ensure_future(self._fetch(ticket_id, version))
            self._in_flight[ticket_id] = pending
            pending.add_done_callback(lambda fut: self._forget(ticket_id, fut))
        return list(await asyncio.shield(pending))

    def _forget(self, ticket_id: str, fut: "asyncio.Future[list[WorkflowAction]]") -> None:
        if self._in_flight.get(ticket_id) is fut:
            del self._in_flight[ticket_id]

    async def _fetch(self, ticket_id: str, version: int) -> list[WorkflowAction]:
        try:
            actions = await self._workflow.get_actions(ticket_id)
        except (TiketFlowError, httpx.HTTPError, ValidationError) as e:
            logger.warning(f"Could not load workflow actions for ticket {ticket_id}: {e}")
            actions = []

        if self._versions.get(ticket_id) != version:
            logger.debug(f"Dropping stale action list for ticket {ticket_id} (version {version})")
            return self.actions(ticket_id)
        self._actions[ticket_id] = actions
        return list(actions)
