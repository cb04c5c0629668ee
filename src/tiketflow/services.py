"""
Service directory REST API — categories (with their form schemas) and the
resources that booking categories lend out, plus the roles a ticket can be
transferred to.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from tiketflow.models.service import Resource, Role, ServiceCategory
from tiketflow.transport.http import HttpClient

DateLike = Union[date, str]


def _as_list(result: Any) -> list[Any]:
    return result if isinstance(result, list) else []


class ServicesAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list_categories(self) -> list[ServiceCategory]:
        result = await self._http.get("/service-categories")
        return [ServiceCategory.model_validate(item) for item in _as_list(result)]

    async def get_category(self, slug: str) -> ServiceCategory:
        """One category by slug, including ``form_schema`` and ``action_schema``."""
        result = await self._http.get(f"/service-categories/{slug}")
        return ServiceCategory.model_validate(result)

    async def get_resources(self, category_id: str) -> list[Resource]:
        """Active resources of a category."""
        result = await self._http.get(f"/service-categories/{category_id}/resources")
        resources = [Resource.model_validate(item) for item in _as_list(result)]
        return [r for r in resources if r.is_active]

    async def get_available_resources(
        self, slug: str, start_date: DateLike, end_date: Optional[DateLike] = None,
    ) -> list[Resource]:
        """Resources free for the whole booking window."""
        params = {"start_date": str(start_date), "end_date": str(end_date or start_date)}
        result = await self._http.get(f"/service-categories/{slug}/resources", params=params)
        return [Resource.model_validate(item) for item in _as_list(result)]

    async def list_roles(self) -> list[Role]:
        """Roles a ticket can be transferred to."""
        result = await self._http.get("/roles")
        return [Role.model_validate(item) for item in _as_list(result)]
