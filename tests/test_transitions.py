import pytest

from surplus.errors import Conflict
from surplus.models.listing import ARCHIVED, AVAILABLE, CLAIMED, LISTING_STATUSES, PENDING
from surplus.services.transitions import (
    APPROVE,
    ARCHIVE,
    DECLINE,
    REQUEST,
    can_transition,
    next_status,
    sources_for,
)


def test_claim_flow_transitions():
    assert next_status(AVAILABLE, REQUEST) == PENDING
    assert next_status(PENDING, APPROVE) == CLAIMED
    assert next_status(PENDING, DECLINE) == AVAILABLE


def test_archive_only_from_available_or_claimed():
    assert set(sources_for(ARCHIVE)) == {AVAILABLE, CLAIMED}
    assert next_status(CLAIMED, ARCHIVE) == ARCHIVED
    assert not can_transition(PENDING, ARCHIVE)


def test_archived_is_terminal():
    for event in (REQUEST, APPROVE, DECLINE, ARCHIVE):
        assert not can_transition(ARCHIVED, event)


@pytest.mark.parametrize("status", [s for s in LISTING_STATUSES if s != AVAILABLE])
def test_request_needs_available(status):
    assert not can_transition(status, REQUEST)

    with pytest.raises(Conflict):
        next_status(status, REQUEST)


def test_review_needs_pending():
    with pytest.raises(Conflict) as exc:
        next_status(CLAIMED, APPROVE)

    assert "claimed" in exc.value.detail
