from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


# Notification types
N_CLAIM = "claim"
N_CLAIM_ACCEPTED = "claim-accepted"
N_CLAIM_DECLINED = "claim-declined"


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Addressee
    user_id: int = Field(foreign_key="users.id", index=True)

    type: str = Field(index=True)  # values: "claim", "claim-accepted", "claim-declined"
    message: str
    link: Optional[str] = None

    listing_id: Optional[uuid.UUID] = Field(default=None, foreign_key="listings.id", index=True)
    claim_id: Optional[uuid.UUID] = Field(default=None, foreign_key="claims.id")

    is_read: bool = Field(default=False)
