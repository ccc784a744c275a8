from typing import Optional
import uuid
from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


# Claim record status values
CLAIM_PENDING = "pending"
CLAIM_APPROVED = "approved"
CLAIM_REJECTED = "rejected"


class ClaimRecord(SQLModel, table=True):
    __tablename__ = "claims"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    claimed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    requester_id: int = Field(foreign_key="users.id", index=True)  # for sending notifications

    status: str = Field(default=CLAIM_PENDING, index=True)  # values: "pending", "approved", "rejected"

    decided_at: Optional[datetime] = None

    __table_args__ = (
        # At most one undecided claim per listing
        Index(
            "uq_claims_one_pending_per_listing",
            "listing_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )
