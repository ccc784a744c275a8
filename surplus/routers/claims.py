import uuid
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from surplus.db.db import get_session
from surplus.errors import NotFound, Unauthorized
from surplus.models.claim import CLAIM_APPROVED, ClaimRecord
from surplus.models.listing import Listing
from surplus.models.user import User
from surplus.utils.auth_helper import get_current_user_required, get_db_user
from surplus.utils.s3_service import sign_listing


router = APIRouter()


@router.get("/mine")
async def get_my_claims(
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    """
    Claim history of the caller, newest first, including declined ones.
    """
    user = get_db_user(session, current_user)

    query = (
        select(ClaimRecord, Listing)
        .join(Listing, ClaimRecord.listing_id == Listing.id)
        .where(ClaimRecord.requester_id == user.id)
        .order_by(ClaimRecord.claimed_at.desc())
    )

    claims = []

    for claim, listing in session.exec(query).all():
        data = claim.model_dump()
        data["listing"] = {
            "id": str(listing.id),
            "title": listing.title,
            "status": listing.status,
        }
        claims.append(data)

    return {"claims": claims}


@router.get("/{claim_id}")
async def get_claim(
    claim_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
):
    """
    Get a claim record - accessible by the requester and the listing owner.
    """
    user = get_db_user(session, current_user)

    query = (
        select(ClaimRecord, Listing)
        .join(Listing, ClaimRecord.listing_id == Listing.id)
        .where(ClaimRecord.id == claim_id)
    )

    result = session.exec(query).first()
    if not result:
        raise NotFound("Claim not found")

    claim, listing = result

    if user.id not in (claim.requester_id, listing.user_id):
        raise Unauthorized("Not authorized to view this claim")

    response = {
        "claim": claim,
        "listing": sign_listing(listing),
    }

    # Pickup details only go to the requester once the owner has agreed
    if claim.status == CLAIM_APPROVED and claim.requester_id == user.id:
        owner = session.get(User, listing.user_id)

        response["owner_contact"] = {
            "name": owner.name,
            "email": owner.email,
            "contact": listing.contact,
        }

    return response
