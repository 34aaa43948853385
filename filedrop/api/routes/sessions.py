from fastapi import APIRouter, Depends, HTTPException

from filedrop.api.dependencies import get_session_repository
from filedrop.core.errors import (
    BackendError,
    BatchOperationError,
    ClientUnavailableError,
    SessionNotFoundError,
    SessionStoreError,
)
from filedrop.models.session import (
    DeleteSessionResponse,
    SessionCreate,
    SessionUpdate,
    UploadSession,
)
from filedrop.storage.session_repository import SessionRepository

router = APIRouter(tags=["sessions"])


def _to_http(e: SessionStoreError) -> HTTPException:
    if isinstance(e, SessionNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ClientUnavailableError):
        return HTTPException(status_code=503, detail="Records backend unavailable.")
    if isinstance(e, BatchOperationError):
        return HTTPException(status_code=502, detail={"message": str(e), "failures": e.failures})
    if isinstance(e, BackendError):
        return HTTPException(status_code=502, detail=str(e))

    return HTTPException(status_code=500, detail="Session storage failed unexpectedly.")


@router.get("/sessions", response_model=list[UploadSession])
async def list_sessions(
    repo: SessionRepository = Depends(get_session_repository),
) -> list[UploadSession]:
    return await repo.list_sessions()


@router.get("/sessions/{session_id}", response_model=UploadSession)
async def get_session(
    session_id: int,
    repo: SessionRepository = Depends(get_session_repository),
) -> UploadSession:
    try:
        return await repo.get_session(session_id)
    except SessionStoreError as e:
        raise _to_http(e)


@router.post("/sessions", response_model=UploadSession, status_code=201)
async def create_session(
    body: SessionCreate,
    repo: SessionRepository = Depends(get_session_repository),
) -> UploadSession:
    try:
        return await repo.create_session(body)
    except SessionStoreError as e:
        raise _to_http(e)


@router.patch("/sessions/{session_id}", response_model=UploadSession)
async def update_session(
    session_id: int,
    body: SessionUpdate,
    repo: SessionRepository = Depends(get_session_repository),
) -> UploadSession:
    try:
        return await repo.update_session(session_id, body)
    except SessionStoreError as e:
        raise _to_http(e)


@router.delete("/sessions/{session_id}", response_model=DeleteSessionResponse)
async def delete_session(
    session_id: int,
    repo: SessionRepository = Depends(get_session_repository),
) -> DeleteSessionResponse:
    """
    deleted=False means the backend rejected the record; it is not an HTTP error.
    """
    try:
        deleted = await repo.delete_session(session_id)
    except SessionStoreError as e:
        raise _to_http(e)

    return DeleteSessionResponse(id=session_id, deleted=deleted)
