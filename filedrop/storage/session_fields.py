import json
import time
from datetime import datetime, timezone
from typing import Any, Final

from filedrop.core.errors import BackendError
from filedrop.models.session import FileDescriptor, SessionCreate, SessionUpdate, UploadSession

# Read projection, in the order the backend expects.
SESSION_FIELDS: Final[tuple[str, ...]] = (
    "Name",
    "Tags",
    "file_data_c",
    "total_size_c",
    "completed_count_c",
    "started_at_c",
    "completed_at_c",
    "CreatedOn",
    "ModifiedOn",
)

# internal attribute -> external record field
FIELD_MAP: Final[dict[str, str]] = {
    "name": "Name",
    "tags": "Tags",
    "files": "file_data_c",
    "total_size": "total_size_c",
    "completed_count": "completed_count_c",
    "started_at": "started_at_c",
    "completed_at": "completed_at_c",
}


def projection_params() -> dict[str, Any]:
    return {"fields": [{"field": {"Name": name}} for name in SESSION_FIELDS]}


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_session_name() -> str:
    return f"Upload Session {int(time.time() * 1000)}"


def descriptor_to_dict(f: FileDescriptor) -> dict[str, Any]:
    return f.model_dump(by_alias=True)


def dump_files(files: list[FileDescriptor] | None) -> str:
    return json.dumps([descriptor_to_dict(f) for f in files or []])


def load_files(blob: str | None) -> list[FileDescriptor]:
    if not blob:
        return []

    try:
        items = json.loads(blob)
        return [FileDescriptor.model_validate(item) for item in items]
    except (TypeError, ValueError) as e:
        raise BackendError(f"Malformed file_data_c blob: {e}") from e


def record_to_session(record: dict[str, Any]) -> UploadSession:
    """
    Full read mapping (list / get): defaults for every absent field,
    startedAt falls back to the record's creation time.
    """
    return UploadSession(
        id=record.get("Id"),
        name=record.get("Name") or "Unnamed Session",
        tags=record.get("Tags") or "",
        files=load_files(record.get("file_data_c")),
        total_size=record.get("total_size_c") or 0,
        completed_count=record.get("completed_count_c") or 0,
        started_at=record.get("started_at_c") or record.get("CreatedOn"),
        completed_at=record.get("completed_at_c"),
        created_on=record.get("CreatedOn"),
        modified_on=record.get("ModifiedOn"),
    )


def echoed_record_to_session(record: dict[str, Any]) -> UploadSession:
    """
    Mapping for the record echoed back by an update: no placeholder name,
    no creation-time fallback.
    """
    return UploadSession(
        id=record.get("Id"),
        name=record.get("Name"),
        tags=record.get("Tags") or "",
        files=load_files(record.get("file_data_c")),
        total_size=record.get("total_size_c") or 0,
        completed_count=record.get("completed_count_c") or 0,
        started_at=record.get("started_at_c"),
        completed_at=record.get("completed_at_c"),
    )


def create_payload(data: SessionCreate) -> dict[str, Any]:
    return {
        "Name": data.name or default_session_name(),
        "Tags": data.tags or "",
        "file_data_c": dump_files(data.files),
        "total_size_c": data.total_size or 0,
        "completed_count_c": data.completed_count or 0,
        "started_at_c": data.started_at or now_iso(),
        "completed_at_c": data.completed_at or None,
    }


def update_payload(session_id: int, data: SessionUpdate) -> dict[str, Any]:
    payload: dict[str, Any] = {"Id": session_id}

    for attr, external in FIELD_MAP.items():
        if attr not in data.model_fields_set:
            continue
        value = getattr(data, attr)
        if attr == "files":
            value = dump_files(value)
        payload[external] = value

    return payload
