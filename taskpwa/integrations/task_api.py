"""HTTP gateway to the task server's REST API."""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from taskpwa.config import settings
from taskpwa.core.exceptions import RemoteNotFound, RemoteValidationError, TransportError
from taskpwa.schemas.task import RemoteTask, TaskContent

logger = logging.getLogger(__name__)


class HttpTaskGateway:
    """Remote task capabilities over HTTP+JSON.

    Every call either returns or raises a ``SyncError``: 404 becomes
    ``RemoteNotFound``, 400/422 ``RemoteValidationError``, anything else that
    is not a success (including connection errors and malformed bodies)
    ``TransportError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        api_prefix: str = settings.API_PREFIX,
    ):
        self.base_url = (base_url or settings.SERVER_BASE_URL).rstrip("/")
        self.api_prefix = api_prefix
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def __aenter__(self) -> "HttpTaskGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _build_url(self, path: str = "") -> str:
        return f"{self.base_url}{self.api_prefix}/tasks{path}"

    @staticmethod
    def _payload(content: TaskContent) -> Dict[str, Any]:
        return content.model_dump(by_alias=True, mode="json")

    async def _request(self, method: str, url: str, *, remote_id: Optional[int] = None, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, url, timeout=self.timeout, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code == 404 and remote_id is not None:
            raise RemoteNotFound(remote_id)
        if response.status_code in (400, 422):
            raise RemoteValidationError(self._error_message(response))
        if response.is_error:
            raise TransportError(
                f"HTTP {response.status_code} on {method} {url}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {method} {url}") from exc
        if not isinstance(data, dict) or not data.get("ok", False):
            raise TransportError(f"Server answered not ok on {method} {url}", status_code=response.status_code)
        return data

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return str(response.json().get("error") or response.text)
        except ValueError:
            return response.text

    @staticmethod
    def _parse_task(raw: Any) -> RemoteTask:
        try:
            return RemoteTask.model_validate(raw)
        except SchemaValidationError as exc:
            raise TransportError(f"Malformed task from server: {exc}") from exc

    async def list_remote(self) -> List[RemoteTask]:
        data = await self._request("GET", self._build_url())
        tasks = [self._parse_task(raw) for raw in data.get("tasks") or []]
        logger.debug(f"Fetched {len(tasks)} tasks from {self.base_url}")
        return tasks

    async def create_remote(self, content: TaskContent) -> RemoteTask:
        data = await self._request("POST", self._build_url(), json=self._payload(content))
        return self._parse_task(data.get("task"))

    async def update_remote(self, remote_id: int, content: TaskContent) -> None:
        await self._request(
            "PUT",
            self._build_url(f"/{remote_id}"),
            remote_id=remote_id,
            json=self._payload(content),
        )

    async def delete_remote(self, remote_id: int) -> None:
        data = await self._request("DELETE", self._build_url(f"/{remote_id}"), remote_id=remote_id)
        if data.get("deleted") is False:
            raise RemoteNotFound(remote_id)
