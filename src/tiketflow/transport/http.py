"""
REST HTTP client for the ticketing backend.
"""

from typing import Any, Optional

import httpx

from tiketflow.errors import ApiError, ConnectionError

DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT_S = 30.0

# Keys a Laravel resource envelope may carry next to "data".
ENVELOPE_KEYS = {"data", "status", "success", "message", "meta", "links"}


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/",
            headers={"User-Agent": "tiketflow/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _unwrap(json_data: Any) -> Any:
        """Unwrap ``{"data": <actual_data>, ...}`` envelopes; pass anything else through."""
        if isinstance(json_data, dict) and "data" in json_data and set(json_data) <= ENVELOPE_KEYS:
            return json_data["data"]
        return json_data

    @staticmethod
    def _body(resp: httpx.Response) -> Any:
        if "application/json" in resp.headers.get("content-type", ""):
            try:
                return resp.json()
            except ValueError:
                return None
        return resp.text

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        try:
            resp = await self._client.request(
                method, path.lstrip("/"), json=body, params=params,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise ConnectionError(f"{method} {path} failed: {e}") from e
        data = self._body(resp)
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, data)
        return self._unwrap(data)

    async def get(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, body=body)

    async def close(self) -> None:
        await self._client.aclose()
