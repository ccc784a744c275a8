import logging
import uuid

from sqlalchemy import delete, exists, update
from sqlmodel import Session

from surplus.errors import Conflict, NotFound, Unauthorized
from surplus.models.claim import ClaimRecord
from surplus.models.listing import ARCHIVED, AVAILABLE, Listing
from surplus.utils.form_validator import ValidatedCreateListing


logger = logging.getLogger(__name__)


def create_listing(session: Session, owner_id: int, form: ValidatedCreateListing) -> Listing:
    listing = Listing(user_id=owner_id, **form.model_dump())

    session.add(listing)
    session.commit()
    session.refresh(listing)

    logger.info("User %s created listing %s", owner_id, listing.id)

    return listing


def get_owned_listing(session: Session, listing_id: uuid.UUID, caller_id: int, action: str) -> Listing:
    listing = session.get(Listing, listing_id)
    if not listing:
        raise NotFound("Listing not found")

    # ownership check
    if listing.user_id != caller_id:
        raise Unauthorized(f"Unauthorized to {action} this listing")

    return listing


def update_listing(session: Session, listing_id: uuid.UUID, caller_id: int, changes: dict) -> Listing:
    listing = get_owned_listing(session, listing_id, caller_id, "edit")

    # Content is frozen once anyone has asked for the item
    result = session.exec(
        update(Listing)
        .where(Listing.id == listing.id)
        .where(Listing.status == AVAILABLE)
        .values(**changes)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        session.rollback()
        raise Conflict("Listing can only be edited while it is available")

    session.commit()
    session.refresh(listing)

    return listing


def delete_listing(session: Session, listing_id: uuid.UUID, caller_id: int) -> list[str]:
    """Delete a listing that was never claimed, returning its image keys."""
    listing = get_owned_listing(session, listing_id, caller_id, "delete")
    images = list(listing.images or [])

    # Claim records are transfer history and must keep their listing
    result = session.exec(
        delete(Listing)
        .where(Listing.id == listing.id)
        .where(Listing.status.in_((AVAILABLE, ARCHIVED)))
        .where(~exists().where(ClaimRecord.listing_id == listing.id))
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        session.rollback()
        raise Conflict("Listings with claim history cannot be deleted, archive it instead")

    session.commit()
    session.expunge(listing)

    logger.info("User %s deleted listing %s", caller_id, listing_id)

    return images
