from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from sqlmodel import Session, select

from surplus.config import get_settings
from surplus.errors import NotFound, Unauthenticated
from surplus.models.user import User

ALGORITHM = "HS256"

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, get_settings().jwt_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_current_user_optional(token: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    if not token:
        return None

    payload = decode_token(token.credentials)
    if not payload or not payload.get("sub"):
        return None

    return payload


def get_current_user_required(token: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    if not token:
        raise Unauthenticated()

    payload = decode_token(token.credentials)
    if not payload or not payload.get("sub"):
        raise Unauthenticated("Invalid or expired token")

    return payload


def get_db_user(session: Session, current_user) -> User:
    user = session.exec(
        select(User).where(User.public_id == current_user["sub"])
    ).first()

    if not user:
        raise NotFound("User not found")

    return user
