"""
Claim lifecycle for listings.

A listing moves ``available -> pending`` when someone requests it and
``pending -> claimed | available`` when the owner reviews that request.
The listing's own ``status`` column is the mutual-exclusion gate: every
transition is a conditional UPDATE on it, checked by rowcount, and the
listing and its claim record are written in the same transaction.
Notifications are sent after the commit and never undo a transition.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from surplus.errors import (
    ClaimMismatch,
    Conflict,
    InvalidArgument,
    ListingUnavailable,
    NotFound,
    SelfClaim,
    Unauthorized,
)
from surplus.models.claim import CLAIM_APPROVED, CLAIM_PENDING, CLAIM_REJECTED, ClaimRecord
from surplus.models.listing import PENDING, Listing
from surplus.models.notification import N_CLAIM, N_CLAIM_ACCEPTED, N_CLAIM_DECLINED
from surplus.models.user import User
from surplus.services.notifications import notify_best_effort
from surplus.services.transitions import APPROVE, ARCHIVE, DECLINE, REQUEST, can_transition, next_status, sources_for


logger = logging.getLogger(__name__)

DECISIONS = (APPROVE, DECLINE)


def listing_link(listing_id: uuid.UUID) -> str:
    return f"/listings/{listing_id}"


def _commit(session: Session, error: type[Conflict]):
    # Constraint violations here mean another writer got in first
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("Claim transition lost a race at commit", exc_info=True)
        raise error()


def request_claim(session: Session, listing_id: uuid.UUID, requester_id: int) -> ClaimRecord:
    listing = session.get(Listing, listing_id)
    if not listing:
        raise NotFound("Listing not found")

    requester = session.get(User, requester_id)
    if not requester:
        raise NotFound("User not found")

    # Prevent self-claim, whatever state the listing is in
    if listing.user_id == requester.id:
        raise SelfClaim()

    if not can_transition(listing.status, REQUEST):
        raise ListingUnavailable()

    target = next_status(listing.status, REQUEST)

    owner_id = listing.user_id
    requester_name = requester.name
    title = listing.title
    now = datetime.now(timezone.utc)

    result = session.exec(
        update(Listing)
        .where(Listing.id == listing.id)
        .where(Listing.status.in_(sources_for(REQUEST)))
        .values(
            status=target,
            pending_requester_id=requester.id,
            pending_requested_at=now,
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        session.rollback()
        logger.warning("Listing %s was taken before user %s could claim it", listing_id, requester_id)
        raise ListingUnavailable()

    claim = ClaimRecord(
        listing_id=listing_id,
        requester_id=requester_id,
        claimed_at=now,
    )

    session.add(claim)
    _commit(session, ListingUnavailable)
    session.refresh(claim)

    logger.info("User %s requested listing %s (claim %s)", requester_id, listing_id, claim.id)

    # Notify owner
    notify_best_effort(
        session,
        user_id=owner_id,
        type=N_CLAIM,
        message=f"{requester_name} wants to get your item: {title}",
        link=listing_link(listing_id),
        listing_id=listing_id,
        claim_id=claim.id,
    )

    return claim


def review_claim(
    session: Session,
    listing_id: uuid.UUID,
    caller_id: int,
    decision: str,
    claim_id: uuid.UUID,
) -> ClaimRecord:
    if decision not in DECISIONS:
        raise InvalidArgument("Invalid decision")

    listing = session.get(Listing, listing_id)
    if not listing:
        raise NotFound("Listing not found")

    # Ensure caller is the owner of the listing
    if listing.user_id != caller_id:
        raise Unauthorized("Not authorized to review claims on this listing")

    claim = session.get(ClaimRecord, claim_id)
    if not claim:
        raise NotFound("Claim not found")

    if claim.listing_id != listing.id:
        raise ClaimMismatch()

    if listing.status != PENDING or listing.pending_claim is None:
        raise Conflict("No pending claim to review")

    if claim.status != CLAIM_PENDING or claim.requester_id != listing.pending_requester_id:
        raise Conflict("This claim has already been reviewed")

    target = next_status(listing.status, decision)

    requester_id = claim.requester_id
    title = listing.title
    now = datetime.now(timezone.utc)

    listing_values = {
        "status": target,
        "pending_requester_id": None,
        "pending_requested_at": None,
    }

    if decision == APPROVE:
        listing_values["claimed_by"] = requester_id
        listing_values["claimed_at"] = now
        claim_status = CLAIM_APPROVED
    else:
        claim_status = CLAIM_REJECTED

    listing_result = session.exec(
        update(Listing)
        .where(Listing.id == listing.id)
        .where(Listing.status.in_(sources_for(decision)))
        .where(Listing.pending_requester_id == requester_id)
        .values(**listing_values)
        .execution_options(synchronize_session=False)
    )

    claim_result = session.exec(
        update(ClaimRecord)
        .where(ClaimRecord.id == claim.id)
        .where(ClaimRecord.status == CLAIM_PENDING)
        .values(status=claim_status, decided_at=now)
        .execution_options(synchronize_session=False)
    )

    if listing_result.rowcount != 1 or claim_result.rowcount != 1:
        session.rollback()
        logger.warning("Claim %s on listing %s was reviewed concurrently", claim_id, listing_id)
        raise Conflict("This claim has already been reviewed")

    _commit(session, Conflict)
    session.refresh(claim)

    logger.info("Owner %s %sd claim %s on listing %s", caller_id, decision, claim_id, listing_id)

    # Notify requester
    if decision == APPROVE:
        notify_best_effort(
            session,
            user_id=requester_id,
            type=N_CLAIM_ACCEPTED,
            message=f"Your claim for '{title}' was accepted!",
            link=listing_link(listing_id),
            listing_id=listing_id,
            claim_id=claim_id,
        )
    else:
        notify_best_effort(
            session,
            user_id=requester_id,
            type=N_CLAIM_DECLINED,
            message=f"Your claim for '{title}' was declined.",
            link=listing_link(listing_id),
            listing_id=listing_id,
            claim_id=claim_id,
        )

    return claim


def archive_listing(session: Session, listing_id: uuid.UUID, caller_id: int) -> Listing:
    listing = session.get(Listing, listing_id)
    if not listing:
        raise NotFound("Listing not found")

    if listing.user_id != caller_id:
        raise Unauthorized("Not authorized to archive this listing")

    target = next_status(listing.status, ARCHIVE)

    result = session.exec(
        update(Listing)
        .where(Listing.id == listing.id)
        .where(Listing.status.in_(sources_for(ARCHIVE)))
        .values(status=target)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        session.rollback()
        raise Conflict("Listing changed state, try again")

    _commit(session, Conflict)
    session.refresh(listing)

    logger.info("Owner %s archived listing %s", caller_id, listing_id)

    return listing
