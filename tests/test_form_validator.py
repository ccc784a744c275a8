import pytest

from surplus.errors import InvalidArgument
from surplus.utils.form_validator import validate_create_listing_form, validate_listing_updates


def _form(**overrides):
    data = {
        "title": "  Fresh eggs ",
        "description": "A dozen eggs from our hens.",
        "quantity": "12",
        "location": "Maple Road",
        "category": "dairy",
        "images": ["uploads/eggs.webp"],
    }
    data.update(overrides)
    return data


def test_create_form_strips_and_defaults():
    form = validate_create_listing_form(_form())
    assert form.title == "Fresh eggs"
    assert form.contact is None
    assert form.expiry_date is None


def test_create_form_needs_an_image():
    with pytest.raises(InvalidArgument) as exc:
        validate_create_listing_form(_form(images=[]))

    assert exc.value.detail.startswith("images")


def test_create_form_rejects_unknown_category():
    with pytest.raises(InvalidArgument):
        validate_create_listing_form(_form(category="furniture"))


def test_updates_only_return_sent_fields():
    assert validate_listing_updates({"title": " Brown eggs "}) == {"title": "Brown eggs"}


def test_updates_reject_protected_fields():
    with pytest.raises(InvalidArgument) as exc:
        validate_listing_updates({"status": "available"})

    assert exc.value.detail == "Field 'status' cannot be updated"


def test_updates_reject_empty_body():
    with pytest.raises(InvalidArgument):
        validate_listing_updates({})


def test_updates_reject_null_for_required_fields():
    with pytest.raises(InvalidArgument) as exc:
        validate_listing_updates({"title": None})

    assert exc.value.detail == "title: Value error, cannot be null"

    with pytest.raises(InvalidArgument):
        validate_listing_updates({"category": None})


def test_updates_may_clear_optional_fields():
    assert validate_listing_updates({"contact": None}) == {"contact": None}
