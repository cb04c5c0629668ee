"""
Workflow REST API — the workflow authority decides which transitions a
viewer may run on a ticket and applies them.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from tiketflow.errors import GENERIC_FAILURE_MESSAGE, ApiError, TiketFlowError, TransitionRejected
from tiketflow.models.workflow import WorkflowAction
from tiketflow.transport.http import HttpClient

logger = logging.getLogger(__name__)


class WorkflowAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def get_actions(self, ticket_id: str) -> list[WorkflowAction]:
        """Actions the current viewer may run on the ticket, in display order.

        Raises TiketFlowError when the response is not a list of actions.
        """
        result = await self._http.get(f"/tickets/{ticket_id}/workflow-actions")
        if not isinstance(result, list):
            raise TiketFlowError(
                "invalid_response", f"Expected a list of actions, got {type(result).__name__}",
                {"body": result},
            )
        return [WorkflowAction.model_validate(item) for item in result]

    async def execute_transition(
        self, ticket_id: str, transition_id: str, payload: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Run a transition. Rejections surface the authority's own message."""
        logger.info(f"Executing transition {transition_id!r} on ticket {ticket_id}")
        try:
            return await self._http.post(
                f"/tickets/{ticket_id}/workflow-transitions/{transition_id}", payload or {},
            )
        except ApiError as e:
            raise TransitionRejected(e.server_message or GENERIC_FAILURE_MESSAGE, status=e.status) from e
