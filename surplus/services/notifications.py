import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from surplus.models.notification import Notification


logger = logging.getLogger(__name__)


def notify(
    session: Session,
    *,
    user_id: int,
    type: str,
    message: str,
    link: Optional[str] = None,
    listing_id: Optional[uuid.UUID] = None,
    claim_id: Optional[uuid.UUID] = None,
) -> Notification:
    """
    Persist one notification for ``user_id`` and commit it.
    - type: "claim", "claim-accepted" or "claim-declined"
    - link: path the client opens from the notification
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        message=message,
        link=link,
        listing_id=listing_id,
        claim_id=claim_id,
    )

    session.add(notification)
    session.commit()

    return notification


def notify_best_effort(session: Session, **fields) -> Optional[Notification]:
    """Like ``notify`` but a failed write is logged and dropped.

    Used after a claim transition has committed: the transition stands
    whether or not the notification lands.
    """
    try:
        return notify(session, **fields)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Failed to send %s notification to user %s", fields.get("type"), fields.get("user_id")
        )
        return None
