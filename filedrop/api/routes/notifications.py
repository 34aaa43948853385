from fastapi import APIRouter, Depends

from filedrop.api.dependencies import get_notifier
from filedrop.services.notifications import NotificationSink

router = APIRouter(tags=["notifications"])


@router.get("/notifications")
def list_notifications(notifier: NotificationSink = Depends(get_notifier)) -> dict:
    return {"notifications": notifier.recent()}


@router.delete("/notifications", status_code=204)
def clear_notifications(notifier: NotificationSink = Depends(get_notifier)) -> None:
    notifier.clear()
