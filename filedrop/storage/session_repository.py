from __future__ import annotations

import logging
from typing import Any

from filedrop.clients.records_client import RecordsClient
from filedrop.core.config import settings
from filedrop.core.errors import (
    BackendError,
    BatchOperationError,
    ClientUnavailableError,
    SessionNotFoundError,
)
from filedrop.models.session import SessionCreate, SessionUpdate, UploadSession
from filedrop.services.notifications import NotificationSink
from filedrop.storage.session_fields import (
    create_payload,
    echoed_record_to_session,
    now_iso,
    projection_params,
    record_to_session,
    update_payload,
)

logger = logging.getLogger(__name__)


def partition_results(
    results: list[dict[str, Any]],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    successful = [r for r in results if r.get("success")]
    failed = [r for r in results if not r.get("success")]

    return successful, failed


class SessionRepository:
    """
    CRUD over upload session records in the remote record store.

    Failure policy differs per operation:
    - list_sessions never raises; any failure yields [].
    - get/create/update raise SessionStoreError subclasses.
    - delete_session returns False when individual records fail.
    Every failure is logged first; backend messages are also pushed to the notifier.
    """

    def __init__(
        self,
        client: RecordsClient | None,
        notifier: NotificationSink,
        record_type: str | None = None,
    ):
        self.client = client
        self.notifier = notifier
        self.record_type = record_type or settings.SESSION_RECORD_TYPE

    def _require_client(self) -> RecordsClient:
        if self.client is None:
            logger.error("Records client not available")
            raise ClientUnavailableError()

        return self.client

    def _check_envelope(self, response: dict[str, Any]) -> None:
        if not response.get("success"):
            message = response.get("message") or "Request failed"
            logger.error("records backend failure: %s", message)
            self.notifier.error(message)
            raise BackendError(message)

    def _failed_messages(self, action: str, failed: list[dict[str, Any]]) -> list[str]:
        messages = [f.get("message") or "Unknown error" for f in failed]
        logger.error("Failed to %s %d sessions: %s", action, len(failed), ", ".join(messages))

        for record in failed:
            if record.get("message"):
                self.notifier.error(record["message"])

        return messages

    async def list_sessions(self) -> list[UploadSession]:
        if self.client is None:
            logger.error("Records client not available")
            return []

        try:
            response = await self.client.fetch_records(self.record_type, projection_params())

            if not response.get("success"):
                message = response.get("message") or "Request failed"
                logger.error("Error fetching upload sessions: %s", message)
                self.notifier.error(message)
                return []

            return [record_to_session(r) for r in response.get("data") or []]
        except Exception as e:
            logger.error("Error fetching upload sessions: %s", e)
            return []

    async def get_session(self, session_id: int | str) -> UploadSession:
        sid = int(session_id)

        try:
            client = self._require_client()
            response = await client.get_record_by_id(self.record_type, sid, projection_params())

            if not response or response.get("data") is None:
                raise SessionNotFoundError(sid)

            return record_to_session(response["data"])
        except Exception as e:
            logger.error("Error fetching session %d: %s", sid, e)
            raise

    async def create_session(self, data: SessionCreate) -> UploadSession:
        try:
            client = self._require_client()
            params = {"records": [create_payload(data)]}

            response = await client.create_record(self.record_type, params)
            self._check_envelope(response)

            results = response.get("results")
            if results:
                successful, failed = partition_results(results)

                if failed:
                    messages = self._failed_messages("create", failed)
                    raise BatchOperationError("Failed to create upload session", messages)

                if successful:
                    created = successful[0].get("data") or {}
                    # size fields are trusted from the request, not re-read
                    return UploadSession(
                        id=created.get("Id"),
                        name=created.get("Name"),
                        tags=created.get("Tags") or "",
                        files=data.files or [],
                        total_size=data.total_size or 0,
                        completed_count=data.completed_count or 0,
                        started_at=data.started_at or now_iso(),
                        completed_at=data.completed_at,
                    )

            raise BackendError("No successful results returned")
        except Exception as e:
            logger.error("Error creating upload session: %s", e)
            raise

    async def update_session(self, session_id: int | str, data: SessionUpdate) -> UploadSession:
        sid = int(session_id)

        try:
            client = self._require_client()
            params = {"records": [update_payload(sid, data)]}

            response = await client.update_record(self.record_type, params)
            self._check_envelope(response)

            results = response.get("results")
            if results:
                successful, failed = partition_results(results)

                if failed:
                    messages = self._failed_messages("update", failed)
                    raise BatchOperationError("Failed to update upload session", messages)

                if successful:
                    return echoed_record_to_session(successful[0].get("data") or {})

            raise BackendError("No successful results returned")
        except Exception as e:
            logger.error("Error updating session %d: %s", sid, e)
            raise

    async def delete_session(self, session_id: int | str) -> bool:
        sid = int(session_id)

        try:
            client = self._require_client()
            response = await client.delete_record(self.record_type, {"RecordIds": [sid]})
            self._check_envelope(response)

            results = response.get("results")
            if not results:
                return False

            successful, failed = partition_results(results)
            if failed:
                self._failed_messages("delete", failed)
                return False

            return len(successful) > 0
        except Exception as e:
            logger.error("Error deleting session %d: %s", sid, e)
            raise
