from jose import jwt
from sqlmodel import select

from surplus.config import get_settings
from surplus.models.claim import ClaimRecord
from surplus.models.listing import PENDING
from surplus.models.notification import Notification


def auth_header(user):
    token = jwt.encode({"sub": user.public_id}, get_settings().jwt_secret, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def reload(session, obj):
    session.expire_all()
    return session.get(type(obj), obj.id)


def assert_pending_invariant(listing):
    assert (listing.status == PENDING) == (listing.pending_claim is not None)
    if listing.pending_claim is not None:
        assert listing.pending_claim["requester_id"] != listing.user_id


def claims_for(session, listing_id):
    session.expire_all()
    return session.exec(select(ClaimRecord).where(ClaimRecord.listing_id == listing_id)).all()


def notifications_for(session, user_id):
    session.expire_all()
    return session.exec(select(Notification).where(Notification.user_id == user_id)).all()
