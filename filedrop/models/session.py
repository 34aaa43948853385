from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class FileDescriptor(BaseModel):
    """
    One entry of a session's `files` blob.

    Values are stored as given (no coercion) and unknown keys are kept,
    so the blob round-trips unchanged. Only keys that were supplied are dumped.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    name: Any = None
    size: Any = None
    type: Any = None
    status: Any = None
    progress: Any = None
    uploaded_at: Any = Field(None, alias="uploadedAt")
    url: Any = None
    error: Any = None

    @model_serializer(mode="wrap")
    def _supplied_keys_only(self, handler, info):
        data = handler(self)
        # an extra key may share a field's python name (e.g. "uploaded_at")
        unset = {
            (field.alias or name) if info.by_alias else name
            for name, field in type(self).model_fields.items()
            if name not in self.model_fields_set
        }

        return {k: v for k, v in data.items() if k not in unset}


class UploadSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(None, alias="Id")
    name: str | None = Field(None, alias="Name")
    tags: str = Field("", alias="Tags")
    files: list[FileDescriptor] = Field(default_factory=list)
    total_size: int = Field(0, alias="totalSize")
    completed_count: int = Field(0, alias="completedCount")
    started_at: str | None = Field(None, alias="startedAt")
    completed_at: str | None = Field(None, alias="completedAt")
    created_on: str | None = Field(None, alias="createdOn")
    modified_on: str | None = Field(None, alias="modifiedOn")


class SessionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, alias="Name")
    tags: str | None = Field(None, alias="Tags")
    files: list[FileDescriptor] | None = None
    total_size: int | None = Field(None, alias="totalSize")
    completed_count: int | None = Field(None, alias="completedCount")
    started_at: str | None = Field(None, alias="startedAt")
    completed_at: str | None = Field(None, alias="completedAt")


class SessionUpdate(SessionCreate):
    """
    Partial update: only fields present in `model_fields_set` are sent.
    """


class DeleteSessionResponse(BaseModel):
    id: int
    deleted: bool
