"""
Action execution controller — drives one ticket's action area.

States:
  IDLE          -> select_action(a), a needs a form  -> AWAITING_FORM
  IDLE          -> select_action(a), no form         -> EXECUTING
  AWAITING_FORM -> confirm(), form valid              -> EXECUTING
  AWAITING_FORM -> confirm(), form invalid            -> AWAITING_FORM
  AWAITING_FORM -> cancel()                           -> IDLE
  EXECUTING     -> success -> SETTLED -> (reload actions) -> IDLE
  EXECUTING     -> failure -> AWAITING_FORM if a form was open, else IDLE

Only one form session is open at a time, and nothing can be selected while a
transition is in flight.
"""

import inspect
import logging
from enum import Enum
from typing import Any, Callable, Optional, Union

from tiketflow.catalog import ActionCatalog
from tiketflow.errors import (
    GENERIC_FAILURE_MESSAGE,
    ControllerError,
    SchemaViolation,
    TiketFlowError,
    TransitionRejected,
)
from tiketflow.forms import FormSession
from tiketflow.models.workflow import WorkflowAction
from tiketflow.workflow import WorkflowAPI

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Status tiket berhasil diperbarui"


class ControllerState(str, Enum):
    IDLE = "idle"
    AWAITING_FORM = "awaiting_form"
    EXECUTING = "executing"
    SETTLED = "settled"


class Notice:
    __slots__ = ("level", "message")

    def __init__(self, level: str, message: str):
        self.level = level
        self.message = message

    def __repr__(self) -> str:
        return f"Notice(level={self.level!r}, message={self.message!r})"


class ActionExecutionController:
    def __init__(
        self,
        ticket_id: str,
        workflow: WorkflowAPI,
        catalog: ActionCatalog,
        on_update: Optional[Callable[[], Any]] = None,
        notify: Optional[Callable[[Notice], None]] = None,
    ):
        self.ticket_id = ticket_id
        self._workflow = workflow
        self._catalog = catalog
        self._on_update = on_update
        self._notify = notify
        self._alive = True
        catalog.retain(ticket_id)

        self.state = ControllerState.IDLE
        self.selected_action: Optional[WorkflowAction] = None
        self.session: Optional[FormSession] = None
        self.last_error: Optional[str] = None

    @property
    def actions(self) -> list[WorkflowAction]:
        return self._catalog.actions(self.ticket_id)

    @property
    def busy(self) -> bool:
        """True while a transition is in flight; every action button is disabled."""
        return self.state == ControllerState.EXECUTING

    @property
    def alive(self) -> bool:
        return self._alive

    async def refresh(self) -> list[WorkflowAction]:
        return await self._catalog.load_actions(self.ticket_id)

    def find_action(self, action_id: str) -> WorkflowAction:
        for action in self.actions:
            if action.id == action_id:
                return action
        raise ControllerError(f"Action {action_id!r} is not available for ticket {self.ticket_id}")

    async def select_action(self, action: Union[WorkflowAction, str]) -> Optional[FormSession]:
        """Pick an action. Returns the opened form session, or None when the
        action ran straight away."""
        self._ensure_alive()
        if self.state != ControllerState.IDLE:
            raise ControllerError(f"Cannot select an action while {self.state.value}", self.state.value)
        if isinstance(action, str):
            action = self.find_action(action)

        self.selected_action = action
        self.last_error = None
        if action.needs_form:
            # Action forms always start empty, fields bound at the payload root.
            self.session = FormSession(action.require_form, prefix="")
            self.state = ControllerState.AWAITING_FORM
            return self.session

        try:
            await self._transition({})
        except TiketFlowError as e:
            self._fail(e)
            return None
        except Exception as e:
            self._fail(e)
            raise
        await self._settle()
        return None

    async def confirm(self) -> bool:
        """Submit the open form. Returns True once the transition went through."""
        self._ensure_alive()
        if self.state != ControllerState.AWAITING_FORM or self.session is None:
            raise ControllerError(f"No form to confirm while {self.state.value}", self.state.value)
        try:
            await self.session.submit(self._transition)
        except SchemaViolation:
            return False
        except TiketFlowError as e:
            self._fail(e)
            return False
        except Exception as e:
            self._fail(e)
            raise
        await self._settle()
        return True

    def cancel(self) -> None:
        if self.state != ControllerState.AWAITING_FORM:
            raise ControllerError(f"Nothing to cancel while {self.state.value}", self.state.value)
        self._discard_session()
        self.state = ControllerState.IDLE

    def detach(self) -> None:
        """The host view is gone: late responses are dropped from now on."""
        if not self._alive:
            return
        self._alive = False
        self._discard_session()
        self._catalog.release(self.ticket_id)

    async def _transition(self, payload: dict[str, Any]) -> Any:
        assert self.selected_action is not None
        self.state = ControllerState.EXECUTING
        self.last_error = None
        self._catalog.invalidate(self.ticket_id)
        return await self._workflow.execute_transition(self.ticket_id, self.selected_action.id, payload)

    def _fail(self, error: Exception) -> None:
        if not self._alive:
            return
        message = error.message if isinstance(error, TransitionRejected) else GENERIC_FAILURE_MESSAGE
        logger.warning(f"Transition on ticket {self.ticket_id} failed: {error}")
        self.last_error = message
        if self.session is not None:
            self.state = ControllerState.AWAITING_FORM
        else:
            self.selected_action = None
            self.state = ControllerState.IDLE
        self._emit(Notice("error", message))

    async def _settle(self) -> None:
        if not self._alive:
            return
        self.state = ControllerState.SETTLED
        self._discard_session()
        self._catalog.invalidate(self.ticket_id)
        try:
            await self._catalog.load_actions(self.ticket_id)
            if self._on_update is not None:
                result = self._on_update()
                if inspect.isawaitable(result):
                    await result
            self._emit(Notice("success", SUCCESS_MESSAGE))
        finally:
            if self._alive:
                self.state = ControllerState.IDLE

    def _emit(self, notice: Notice) -> None:
        if self._notify is not None:
            self._notify(notice)

    def _discard_session(self) -> None:
        if self.session is not None:
            self.session.close()
        self.session = None
        self.selected_action = None

    def _ensure_alive(self) -> None:
        if not self._alive:
            raise ControllerError("Controller has been detached")
