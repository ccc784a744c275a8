import uuid
from typing import Optional
from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from sqlmodel import Session, and_, select

from surplus.db.db import get_session
from surplus.errors import NotFound
from surplus.models.claim import CLAIM_APPROVED, CLAIM_PENDING, ClaimRecord
from surplus.models.listing import AVAILABLE, PENDING, Listing
from surplus.models.user import User
from surplus.services.claims import archive_listing, request_claim, review_claim
from surplus.services.listings import create_listing, delete_listing, update_listing
from surplus.utils.auth_helper import get_current_user_optional, get_current_user_required, get_db_user
from surplus.utils.form_validator import validate_create_listing_form, validate_listing_updates
from surplus.utils.s3_service import delete_s3_object, generate_signed_url, get_all_urls, sign_listing


router = APIRouter()


class ReviewClaimRequest(BaseModel):
    decision: Optional[str] = None  # "approve" or "decline", checked by the claim service
    claimRecordId: uuid.UUID


@router.post("/create")
def add_listing(
    payload: dict = Body(...),
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    form = validate_create_listing_form(payload)
    listing = create_listing(session, user.id, form)

    return {
        "message": "Listing created successfully",
        "listingId": str(listing.id),
    }


@router.get("/all")
async def get_all_listings(
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    # Pending listings stay visible so others can see the item is spoken for
    query = (
        select(Listing)
        .where(Listing.status.in_((AVAILABLE, PENDING)))
        .order_by(Listing.created_at.desc())
    )

    if category and category != "all":
        query = query.where(Listing.category == category)

    listings = session.exec(query).all()

    return {
        "listings": get_all_urls(listings),
    }


@router.get("/owner-claims")
async def get_owner_claims(
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    """
    Listings owned by the caller that are waiting on a review.
    """
    user = get_db_user(session, current_user)

    query = (
        select(Listing, ClaimRecord, User)
        .join(
            ClaimRecord,
            and_(ClaimRecord.listing_id == Listing.id, ClaimRecord.status == CLAIM_PENDING),
        )
        .join(User, User.id == ClaimRecord.requester_id)
        .where(Listing.user_id == user.id)
        .where(Listing.status == PENDING)
        .order_by(Listing.pending_requested_at.desc())
    )

    claims = []

    for listing, claim, requester in session.exec(query).all():
        claims.append({
            "id": str(listing.id),
            "title": listing.title,
            "image": generate_signed_url(listing.images[0]) if listing.images else None,
            "pending_claim": {
                "claim_record_id": str(claim.id),
                "user": {
                    "id": requester.public_id,
                    "name": requester.name,
                    "avatar": requester.image,
                },
                "requested_at": listing.pending_requested_at,
            },
        })

    return {"claims": claims}


@router.get("/{listing_id}")
async def get_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_optional),
):
    query = (
        select(Listing, User)
        .join(User, User.id == Listing.user_id)
        .where(Listing.id == listing_id)
    )

    result = session.exec(query).first()
    if not result:
        raise NotFound("Listing not found")

    listing, owner = result

    # latest claim by the viewer, so the client knows whether to offer "request"
    claim_status = "none"

    if current_user:
        viewer = session.exec(
            select(User).where(User.public_id == current_user["sub"])
        ).first()

        if viewer:
            claim = session.exec(
                select(ClaimRecord)
                .where(ClaimRecord.listing_id == listing.id)
                .where(ClaimRecord.requester_id == viewer.id)
                .order_by(ClaimRecord.claimed_at.desc())
            ).first()

            if claim:
                claim_status = claim.status

    return {
        "listing": sign_listing(listing),
        "claim_status": claim_status,
        "owner": {
            "public_id": owner.public_id,
            "name": owner.name,
            "image": owner.image,
        },
    }


@router.patch("/{listing_id}")
def edit_listing(
    listing_id: uuid.UUID,
    updates: dict = Body(...),
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    changes = validate_listing_updates(updates)
    listing = update_listing(session, listing_id, user.id, changes)

    return {"listing": sign_listing(listing)}


@router.delete("/{listing_id}")
def remove_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    images = delete_listing(session, listing_id, user.id)

    for key in images:
        delete_s3_object(key)

    return {"message": "Listing deleted successfully"}


@router.post("/{listing_id}/archive")
def archive(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    listing = archive_listing(session, listing_id, user.id)

    return {
        "message": "Listing archived",
        "status": listing.status,
    }


@router.post("/{listing_id}/claim")
def claim_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    claim = request_claim(session, listing_id, user.id)

    return {
        "message": "Claim request sent to the owner",
        "claimRecordId": str(claim.id),
    }


@router.post("/{listing_id}/review-claim")
def review_listing_claim(
    listing_id: uuid.UUID,
    payload: ReviewClaimRequest,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    user = get_db_user(session, current_user)

    claim = review_claim(session, listing_id, user.id, payload.decision, payload.claimRecordId)

    if claim.status == CLAIM_APPROVED:
        message = "Claim accepted and item marked as unavailable."
    else:
        message = "Claim declined and item is available again."

    return {
        "message": message,
        "claimRecordId": str(claim.id),
        "status": claim.status,
    }
