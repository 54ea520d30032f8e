"""
Admin API Client Module

Async REST client for the platform backend. Follows the backend's
`/{resource}/get/all`, `/{resource}/create`, `/{resource}/update`,
`/{resource}/delete/{id}` conventions and attaches the session's bearer token
to every request.
"""

import httpx
import logging
from typing import Any, Dict, List, Optional

from .envelope import extract_message, unwrap_list, unwrap_record
from .errors import ServerError, TransportError
from .session import SessionProvider

logger = logging.getLogger("admin_console.api")


class AdminApiClient:
    """REST client for the admin backend"""

    def __init__(
        self,
        base_url: str,
        session: SessionProvider,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, *parts: Any) -> str:
        path = "/".join(str(p).strip("/") for p in parts if str(p) != "")
        return f"{self.base_url}/{path}"

    async def request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        """Send a request and return the decoded JSON body

        Raises:
            TransportError: connection failure or timeout
            ServerError: any non-2xx response, carrying the backend's message
        """
        url = self._url(path)
        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                headers=self._headers()
            )
        except httpx.TimeoutException as e:
            logger.error(f"{method} {url} timed out: {e}")
            raise TransportError("Request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError("Network error, please try again") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            if body is None:
                body = response.text or {}
            message = extract_message(body, default=f"Request failed with status {response.status_code}")
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise ServerError(response.status_code, message, payload=body)

        return {} if body is None else body

    async def get_all(self, resource: str, *path: Any, key: Optional[str] = None) -> List[Dict[str, Any]]:
        """GET /{resource}/get/all (or /{resource}/get/<path...>) as a list"""
        segments = path or ("all",)
        body = await self.request("GET", self._path(resource, "get", *segments))
        return unwrap_list(body, key or resource)

    async def get_one(self, resource: str, kind: str, record_id: Any,
                      key: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """GET /{resource}/get/{kind}/{id} as a single record"""
        body = await self.request("GET", self._path(resource, "get", kind, record_id))
        return unwrap_record(body, key or kind)

    async def create(self, resource: str, payload: dict, *path: Any) -> Any:
        """POST /{resource}/create[/<path...>]"""
        return await self.request("POST", self._path(resource, "create", *path), json=payload)

    async def update(self, resource: str, payload: dict, *path: Any) -> Any:
        """PUT /{resource}/update[/<path...>]"""
        return await self.request("PUT", self._path(resource, "update", *path), json=payload)

    async def delete(self, resource: str, record_id: Any, *path: Any) -> Any:
        """DELETE /{resource}/delete[/<path...>]/{id}"""
        return await self.request("DELETE", self._path(resource, "delete", *path, record_id))

    async def set_flag(self, resource: str, flag: str, payload: dict) -> Any:
        """PUT /{resource}/update/{flag} for single-field status endpoints"""
        return await self.update(resource, payload, flag)

    @staticmethod
    def _path(*parts: Any) -> str:
        return "/".join(str(p) for p in parts)

    async def close(self):
        """Close the HTTP client"""
        await self._client.aclose()

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
