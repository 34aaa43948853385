from pydantic import BaseModel, ConfigDict, Field


class FileInfo(BaseModel):
    name: str
    size: int = Field(..., ge=0)
    type: str = ""


class UploadResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    size: int
    type: str
    status: str = "completed"
    progress: int = 100
    uploaded_at: str = Field(..., alias="uploadedAt")
    url: str
    error: str | None = None


class FileValidationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    errors: list[str]


class UploadSimulationResponse(BaseModel):
    result: UploadResult
    progress: list[int]


class UploadItemResponse(BaseModel):
    filename: str
    status: str

    result: UploadResult | None = None
    error_detail: str | None = None


class UploadResponse(BaseModel):
    uploads: list[UploadItemResponse]
    has_errors: bool
