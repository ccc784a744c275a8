import uuid
from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session, func, select

from surplus.db.db import get_session
from surplus.errors import NotFound
from surplus.models.notification import Notification
from surplus.utils.auth_helper import get_current_user_required, get_db_user


router = APIRouter()

@router.get("/")
async def get_my_notifications(
    limit: int = 50,
    unread_only: bool = False,
    type: Optional[str] = None,  # "claim", "claim-accepted" or "claim-declined"
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    query = (
        select(Notification)
        .where(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )

    if unread_only:
        query = query.where(Notification.is_read == False)

    if type:
        query = query.where(Notification.type == type)

    notifications = session.exec(query).all()

    return {"notifications": notifications}

@router.get("/count")
async def get_unread_notifications_count(
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    count = session.exec(
        select(func.count(Notification.id))
        .where(Notification.user_id == user.id)
        .where(Notification.is_read == False)
    ).one()

    return { "count": count }

@router.post("/{id}/mark-read")
async def mark_notification_read(
    id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    notif = session.exec(
        select(Notification)
        .where(Notification.id == id)
        .where(Notification.user_id == user.id)
    ).first()

    if not notif:
        raise NotFound("Notification not found")

    notif.is_read = True
    session.add(notif)
    session.commit()

    return {"ok": True}

@router.post("/mark-all-read")
async def mark_all_notifications_read(
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    notifications = session.exec(
        select(Notification)
        .where(Notification.user_id == user.id)
        .where(Notification.is_read == False)
    ).all()

    for notif in notifications:
        notif.is_read = True
        session.add(notif)

    session.commit()

    return {"ok": True}
