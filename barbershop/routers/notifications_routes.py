# barbershop/routers/notifications_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from barbershop.auth import get_current_user
from barbershop.deps import get_outbox
from barbershop.schemas import NotificationPublic
from barbershop.stores import SqlOutbox

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("/me", response_model=List[NotificationPublic])
def my_notifications(
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    return outbox.for_recipient(current_user["id"])


# registered before /{notification_id}/read so "me" is not taken for an id
@router.patch("/me/read")
def mark_all_read(
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    return {"updated": outbox.mark_all_read(current_user["id"])}


@router.patch("/{notification_id}/read", response_model=NotificationPublic)
def mark_read(
    notification_id: str,
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    # other users' notifications are reported as missing
    note = outbox.mark_read(notification_id, current_user["id"])
    if note is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return note
