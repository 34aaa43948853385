from __future__ import annotations

import logging
from typing import Any

import httpx

from filedrop.core.config import settings

logger = logging.getLogger(__name__)


class RecordsClient:
    """
    Async client for the remote record store.

    Every call returns the backend's JSON envelope unchanged:
        fetch       -> {"success", "message"?, "data": [record, ...]}
        get by id   -> {"data": record | None}
        create/update/delete -> {"success", "message"?, "results"?: [{"success", "data"}, ...]}
    """

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    @staticmethod
    def connect(
        base_url: str,
        *,
        project_id: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RecordsClient:
        headers = {"Accept": "application/json"}
        if project_id:
            headers["X-Project-Id"] = project_id
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        return RecordsClient(http)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _send(self, method: str, url: str, params: dict[str, Any]) -> dict[str, Any]:
        resp = await self.http.request(method, url, json=params)

        # backend reports record-level problems as a JSON envelope, even on 4xx
        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and "success" in body:
                logger.warning(
                    "records backend %s %s -> %d: %s",
                    method,
                    url,
                    resp.status_code,
                    body.get("message"),
                )
                return body
            resp.raise_for_status()

        return resp.json()

    async def fetch_records(self, record_type: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._send("POST", f"/{record_type}/fetch", params)

    async def get_record_by_id(
        self, record_type: str, record_id: int, params: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._send("POST", f"/{record_type}/{record_id}/get", params)

    async def create_record(self, record_type: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._send("POST", f"/{record_type}", params)

    async def update_record(self, record_type: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._send("PATCH", f"/{record_type}", params)

    async def delete_record(self, record_type: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._send("DELETE", f"/{record_type}", params)


def default_records_client() -> RecordsClient | None:
    if not settings.RECORDS_API_URL:
        return None

    return RecordsClient.connect(
        settings.RECORDS_API_URL,
        project_id=settings.RECORDS_PROJECT_ID,
        api_key=settings.RECORDS_API_KEY,
        timeout=settings.RECORDS_TIMEOUT_SECONDS,
    )
