from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request) -> dict:
    client = getattr(request.app.state, "records_client", None)

    return {"status": "ok", "records_backend": "configured" if client else "unavailable"}
