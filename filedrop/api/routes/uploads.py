from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from filedrop.api.dependencies import get_upload_simulator
from filedrop.core.config import settings
from filedrop.core.errors import UploadFailedError
from filedrop.models.upload import (
    FileInfo,
    FileValidationResult,
    UploadItemResponse,
    UploadResponse,
    UploadSimulationResponse,
)
from filedrop.services.upload.simulator import UploadSimulator
from filedrop.services.upload.validator import validate_file

router = APIRouter(tags=["uploads"])
logger = logging.getLogger(__name__)


def _max_size(max_size: int | None) -> int:
    return max_size if max_size is not None else settings.MAX_UPLOAD_MB * 1024 * 1024


@router.post("/uploads/validate", response_model=FileValidationResult)
def validate(
    body: FileInfo,
    max_size: int | None = Query(None, ge=0),
) -> FileValidationResult:
    return validate_file(body, _max_size(max_size))


@router.post("/uploads/simulate", response_model=UploadSimulationResponse)
async def simulate(
    body: FileInfo,
    simulator: UploadSimulator = Depends(get_upload_simulator),
) -> UploadSimulationResponse:
    """
    Validate, then run one simulated upload and return every progress value reported.
    """
    check = validate_file(body, _max_size(None))
    if not check.is_valid:
        raise HTTPException(status_code=422, detail=check.errors)

    progress: list[int] = []
    try:
        result = await simulator.simulate(body, progress.append)
    except UploadFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return UploadSimulationResponse(result=result, progress=progress)


async def _measure(upload_file: UploadFile) -> int:
    total = 0
    chunk_size = 1024 * 1024  # 1MB

    await upload_file.seek(0)
    while True:
        chunk = await upload_file.read(chunk_size)
        if not chunk:
            break
        total += len(chunk)

    return total


@router.post("/uploads", response_model=UploadResponse)
async def upload(
    files: list[UploadFile] = File(...),
    simulator: UploadSimulator = Depends(get_upload_simulator),
) -> UploadResponse:
    """
    Validate each file and run a simulated upload for it.
    One bad file won't fail the whole request; nothing is stored.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files provided.")

    if len(files) > settings.MAX_FILES_PER_REQUEST:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files. Max allowed: {settings.MAX_FILES_PER_REQUEST}.",
        )

    results: list[UploadItemResponse] = []
    has_errors = False

    for f in files:
        filename = f.filename or "file"

        try:
            info = FileInfo(
                name=filename,
                size=f.size if f.size is not None else await _measure(f),
                type=f.content_type or "",
            )
        finally:
            await f.close()

        check = validate_file(info, _max_size(None))
        if not check.is_valid:
            has_errors = True
            results.append(
                UploadItemResponse(
                    filename=filename,
                    status="error",
                    error_detail="; ".join(check.errors),
                )
            )
            continue

        try:
            result = await simulator.simulate(info)
        except UploadFailedError as e:
            has_errors = True
            logger.warning("upload failed filename=%s: %s", filename, e)
            results.append(
                UploadItemResponse(filename=filename, status="error", error_detail=str(e))
            )
            continue

        results.append(UploadItemResponse(filename=filename, status="ok", result=result))

    return UploadResponse(uploads=results, has_errors=has_errors)
