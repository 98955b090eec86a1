"""Async HTTP wrapper around the contact book REST API."""
import logging
from typing import Any, Dict, List, Optional

import httpx


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:4000/api"


class APIError(Exception):
    """Non-2xx response or transport failure. status_code is 0 for the latter."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Request failed with status {response.status_code}"

    if not isinstance(body, dict):
        return f"Request failed with status {response.status_code}"
    message = str(body.get("error") or f"Request failed with status {response.status_code}")
    fields = body.get("fields") or {}
    if fields:
        details = "; ".join(f"{name}: {', '.join(msgs)}" for name, msgs in fields.items())
        message = f"{message}: {details}"
    return message


class ContactBookAPI:
    """One method per endpoint. No retries; failures raise APIError immediately."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def from_base_url(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ContactBookAPI":
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport))

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "ContactBookAPI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def list_contacts(
        self, search: str = "", page: int = 1, page_size: int = 10, sort: str = "last_name:asc"
    ) -> Dict[str, Any]:
        params = {"search": search, "page": page, "pageSize": page_size, "sort": sort}
        return await self._request("GET", "/contacts", params=params)

    async def get_contact(self, contact_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/contacts/{contact_id}")

    async def create_contact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/contacts", json=data)

    async def update_contact(self, contact_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/contacts/{contact_id}", json=data)

    async def delete_contact(self, contact_id: int) -> None:
        await self._request("DELETE", f"/contacts/{contact_id}")

    async def list_notes(self, contact_id: int) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/contacts/{contact_id}/notes")

    async def add_note(self, contact_id: int, body: str) -> Dict[str, Any]:
        return await self._request("POST", f"/contacts/{contact_id}/notes", json={"body": body})

    async def get_preferences(self) -> Dict[str, Any]:
        return await self._request("GET", "/preferences")

    async def put_preferences(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/preferences", json=payload)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"{method} {path} failed: {exc}")
            raise APIError(0, "Network error, please try again") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise APIError(response.status_code, message)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()
