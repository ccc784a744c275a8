import logging
from functools import lru_cache
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from surplus.config import get_settings
from surplus.models.listing import Listing


logger = logging.getLogger(__name__)


@lru_cache
def get_s3_client():
    settings = get_settings()

    return boto3.client(
        service_name="s3",
        endpoint_url=f"https://{settings.cloudflare_account_id}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name="auto",
    )


def generate_signed_url(key: str, expires_in=3600) -> Optional[str]:
    try:
        return get_s3_client().generate_presigned_url(
                "get_object",
                Params={"Bucket": get_settings().r2_bucket, "Key": key},
                ExpiresIn=expires_in
            )
    except (BotoCoreError, ClientError):
        logger.exception("Error generating signed URL for %s", key)
        return None


def delete_s3_object(key: str):
    try:
        get_s3_client().delete_object(Bucket=get_settings().r2_bucket, Key=key)
    except (BotoCoreError, ClientError):
        logger.exception("Error deleting S3 object %s", key)


def sign_listing(listing: Listing) -> dict:
    data = listing.model_dump(exclude={"pending_requester_id", "pending_requested_at"})
    data["images"] = [generate_signed_url(key) for key in listing.images or []]
    data["pending_claim"] = listing.pending_claim

    return data


def get_all_urls(db_listings: list):
    return [sign_listing(listing) for listing in db_listings]
