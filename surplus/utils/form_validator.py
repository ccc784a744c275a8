from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from surplus.errors import InvalidArgument


Category = Literal["produce", "dairy", "bakery", "meat", "pantry", "other"]


class ValidatedCreateListing(BaseModel):
    title: str = Field(min_length=3, max_length=80)
    description: str = Field(min_length=1, max_length=1000)
    quantity: str = Field(min_length=1, max_length=60)
    location: str = Field(min_length=3, max_length=120)
    category: Category
    images: List[str] = Field(min_length=1)
    expiry_date: Optional[datetime] = None
    contact: Optional[str] = Field(default=None, max_length=120)


class ValidatedListingUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=3, max_length=80)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    quantity: Optional[str] = Field(default=None, min_length=1, max_length=60)
    location: Optional[str] = Field(default=None, min_length=3, max_length=120)
    category: Optional[Category] = None
    expiry_date: Optional[datetime] = None
    contact: Optional[str] = Field(default=None, max_length=120)

    # only expiry_date and contact may be cleared
    @field_validator("title", "description", "quantity", "location", "category")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def validate_create_listing_form(data: dict) -> ValidatedCreateListing:
    cleaned = {k: _strip(v) for k, v in data.items() if k != "images"}
    cleaned["images"] = data.get("images")

    try:
        return ValidatedCreateListing(**cleaned)
    except ValidationError as e:
        raise InvalidArgument(_first_error(e))


def validate_listing_updates(updates: dict) -> dict:
    """Validate a partial edit, returning only the fields that were sent."""
    if not updates:
        raise InvalidArgument("No fields to update")

    try:
        validated = ValidatedListingUpdate(**{k: _strip(v) for k, v in updates.items()})
    except ValidationError as e:
        raise InvalidArgument(_first_error(e))

    return validated.model_dump(exclude_unset=True)


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(p) for p in err["loc"]) or "body"

    if err["type"] == "extra_forbidden":
        return f"Field '{field}' cannot be updated"

    return f"{field}: {err['msg']}"
