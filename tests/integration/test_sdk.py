"""
Integration tests against a running helpdesk backend.

Requires environment variables:
  TIKETFLOW_TOKEN          bearer token of a user who can act on the ticket
  TIKETFLOW_TICKET_ID      a ticket with at least one workflow action
  TIKETFLOW_API_BASE_URL   (optional) defaults to http://localhost:8000/api

Read-only: no transition is executed.

Run: TIKETFLOW_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest
import pytest_asyncio

from tiketflow import AsyncTiketFlow, ApiError
from tiketflow.controller import ControllerState

SKIP = not os.environ.get("TIKETFLOW_INTEGRATION")
TICKET_ID = os.environ.get("TIKETFLOW_TICKET_ID", "1")

pytestmark = pytest.mark.skipif(SKIP, reason="TIKETFLOW_INTEGRATION not set")


@pytest_asyncio.fixture
async def client():
    async with AsyncTiketFlow.from_env() as c:
        yield c


class TestServiceDirectory:
    @pytest.mark.asyncio
    async def test_categories_have_slugs(self, client):
        categories = await client.services.list_categories()
        assert all(c.slug for c in categories)

    @pytest.mark.asyncio
    async def test_category_forms_bind(self, client):
        for category in await client.services.list_categories():
            full = await client.services.get_category(category.slug)
            assert full.slug == category.slug


class TestWorkflowActions:
    @pytest.mark.asyncio
    async def test_actions_parse(self, client):
        actions = await client.workflow.get_actions(TICKET_ID)
        assert all(a.id for a in actions)

    @pytest.mark.asyncio
    async def test_rejects_invalid_token(self):
        async with AsyncTiketFlow.from_env(token="invalid") as c:
            with pytest.raises(ApiError):
                await c.workflow.get_actions(TICKET_ID)

    @pytest.mark.asyncio
    async def test_open_and_cancel_form(self, client):
        controller = client.action_controller(TICKET_ID)
        await controller.refresh()
        with_form = [a for a in controller.actions if a.needs_form]
        if not with_form:
            pytest.skip("ticket has no action with a form")
        session = await controller.select_action(with_form[0])
        assert controller.state == ControllerState.AWAITING_FORM
        assert session.slots
        controller.cancel()
        assert controller.state == ControllerState.IDLE
