import logging
import threading
from time import perf_counter
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_shared_clients: dict[str, httpx.AsyncClient] = {}
_shared_clients_lock = threading.Lock()


def _get_shared_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    with _shared_clients_lock:
        client = _shared_clients.get(base_url)
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url,
                timeout=httpx.Timeout(timeout, connect=10.0),
                limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
            )
            _shared_clients[base_url] = client
        return client


async def close_shared_clients() -> None:
    with _shared_clients_lock:
        clients = list(_shared_clients.values())
        _shared_clients.clear()
    for client in clients:
        await client.aclose()


class ViewCatalogClient:
    """Async client for the host platform's view and group REST endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        api_token: str | None = None,
        token_header: str = "X-Cybozu-API-Token",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._token_header = token_header
        self._client = client or _get_shared_client(self.base_url, timeout)

    def _headers(self) -> dict[str, str]:
        if not self._api_token:
            return {}
        return {self._token_header: self._api_token}

    async def _perform_request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        """Execute an HTTP request while recording latency."""

        started = perf_counter()
        try:
            response = await self._client.request(method, path, headers=self._headers() or None, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            elapsed_ms = (perf_counter() - started) * 1000
            logger.warning(
                "Catalog request failed: method=%s path=%s status=%s elapsed_ms=%.1f",
                method,
                path,
                exc.response.status_code,
                elapsed_ms,
            )
            raise
        except httpx.HTTPError as exc:
            elapsed_ms = (perf_counter() - started) * 1000
            logger.warning(
                "Catalog request error: method=%s path=%s elapsed_ms=%.1f error=%s",
                method,
                path,
                elapsed_ms,
                exc,
            )
            raise

        elapsed_ms = (perf_counter() - started) * 1000
        logger.info(
            "Catalog request: method=%s path=%s status=%s elapsed_ms=%.1f",
            method,
            path,
            response.status_code,
            elapsed_ms,
        )
        return response

    async def _get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        response = await self._perform_request("GET", path, params=params)
        try:
            return response.json()
        except ValueError as exc:
            # login and maintenance pages come back as 200 text/html
            logger.warning(
                "Catalog response is not JSON: path=%s content_type=%s",
                path,
                response.headers.get("content-type"),
            )
            raise httpx.DecodingError(f"non-JSON body from {path}", request=response.request) from exc

    async def get_views(self, app_id: str, preview: bool = False) -> dict[str, Any]:
        """Views of an app; ``preview`` reads the not-yet-deployed settings the editor works on."""
        path = "/k/v1/preview/app/views.json" if preview else "/k/v1/app/views.json"
        return await self._get_json(path, params={"app": app_id})

    async def get_groups(self) -> dict[str, Any]:
        return await self._get_json("/v1/groups.json")

    async def get_user_groups(self, user_code: str) -> dict[str, Any]:
        return await self._get_json("/v1/user/groups.json", params={"code": user_code})
