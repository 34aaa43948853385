from fastapi import Request

from filedrop.services.notifications import NotificationSink, default_notification_sink
from filedrop.services.upload.simulator import UploadSimulator, default_upload_simulator
from filedrop.storage.session_repository import SessionRepository


def get_notifier(request: Request) -> NotificationSink:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        notifier = default_notification_sink()
        request.app.state.notifier = notifier

    return notifier


def get_session_repository(request: Request) -> SessionRepository:
    # records_client is None when the backend is not configured
    client = getattr(request.app.state, "records_client", None)

    return SessionRepository(client, get_notifier(request))


def get_upload_simulator(request: Request) -> UploadSimulator:
    simulator = getattr(request.app.state, "upload_simulator", None)
    if simulator is None:
        simulator = default_upload_simulator()
        request.app.state.upload_simulator = simulator

    return simulator
