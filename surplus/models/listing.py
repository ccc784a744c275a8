from typing import List, Optional
import uuid
from sqlalchemy import JSON, CheckConstraint, Column
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


# Listing status values
AVAILABLE = "available"
PENDING = "pending"
CLAIMED = "claimed"
ARCHIVED = "archived"

LISTING_STATUSES = (AVAILABLE, PENDING, CLAIMED, ARCHIVED)

CATEGORIES = ("produce", "dairy", "bakery", "meat", "pantry", "other")


class Listing(SQLModel, table=True):
    __tablename__ = "listings"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Owner
    user_id: int = Field(foreign_key="users.id", index=True)

    # Listing fields
    title: str
    description: str
    category: str = Field(index=True)
    quantity: str
    location: str
    contact: Optional[str] = None
    expiry_date: Optional[datetime] = None
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))  # storage keys, in display order

    status: str = Field(default=AVAILABLE, index=True)  # values: "available", "pending", "claimed", "archived"

    # Embedded pending claim, set only while status == "pending"
    pending_requester_id: Optional[int] = Field(default=None, foreign_key="users.id")
    pending_requested_at: Optional[datetime] = None

    claimed_by: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    claimed_at: Optional[datetime] = None

    __table_args__ = (
        CheckConstraint(
            "(status = 'pending' AND pending_requester_id IS NOT NULL AND pending_requested_at IS NOT NULL)"
            " OR (status != 'pending' AND pending_requester_id IS NULL AND pending_requested_at IS NULL)",
            name="ck_listings_pending_claim_iff_pending",
        ),
        CheckConstraint(
            "pending_requester_id IS NULL OR pending_requester_id != user_id",
            name="ck_listings_no_self_claim",
        ),
    )

    @property
    def pending_claim(self) -> Optional[dict]:
        if self.pending_requester_id is None:
            return None

        return {
            "requester_id": self.pending_requester_id,
            "requested_at": self.pending_requested_at,
        }
