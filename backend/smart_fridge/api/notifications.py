from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_user
from smart_fridge.schemas.cart import NotificationRead
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import NotFoundError
from smart_fridge.storage.repositories import list_notifications, mark_all_notifications_read, mark_notification_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
def notifications(
    unread_only: bool = Query(default=False),
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    return list_notifications(session, user.user_id, unread_only=unread_only)


@router.post("/read-all")
def read_all(user: UserContext = Depends(get_user), session: Session = Depends(get_db)) -> dict:
    return {"updated": mark_all_notifications_read(session, user.user_id)}


@router.post("/{notification_id}/read", response_model=NotificationRead)
def read_one(
    notification_id: int,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    try:
        return mark_notification_read(session, user.user_id, notification_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
