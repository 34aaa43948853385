import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from filedrop.api.routes.health import router as health_router
from filedrop.api.routes.notifications import router as notifications_router
from filedrop.api.routes.sessions import router as sessions_router
from filedrop.api.routes.uploads import router as uploads_router
from filedrop.clients.records_client import default_records_client
from filedrop.core.config import settings
from filedrop.core.logging import setup_logging
from filedrop.services.notifications import default_notification_sink
from filedrop.services.upload.simulator import default_upload_simulator

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.notifier = default_notification_sink()
    app.state.upload_simulator = default_upload_simulator()

    # Records client is optional (fail-soft): without it only list works, returning []
    client = default_records_client()
    app.state.records_client = client
    if client is None:
        logger.warning("RECORDS_API_URL not set, session storage disabled")
    else:
        logger.info("Records backend: %s", settings.RECORDS_API_URL)

    yield

    if client is not None:
        await client.aclose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(sessions_router)
app.include_router(uploads_router)
app.include_router(notifications_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})

    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
