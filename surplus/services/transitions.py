from surplus.errors import Conflict
from surplus.models.listing import ARCHIVED, AVAILABLE, CLAIMED, PENDING


# Events
REQUEST = "request"
APPROVE = "approve"
DECLINE = "decline"
ARCHIVE = "archive"

# (from_status, event) -> to_status
TRANSITIONS: dict[tuple[str, str], str] = {
    (AVAILABLE, REQUEST): PENDING,
    (PENDING, APPROVE): CLAIMED,
    (PENDING, DECLINE): AVAILABLE,
    (AVAILABLE, ARCHIVE): ARCHIVED,
    (CLAIMED, ARCHIVE): ARCHIVED,
}


def can_transition(status: str, event: str) -> bool:
    return (status, event) in TRANSITIONS


def sources_for(event: str) -> tuple[str, ...]:
    """Statuses from which ``event`` is allowed."""
    return tuple(src for (src, ev) in TRANSITIONS if ev == event)


def next_status(status: str, event: str) -> str:
    """Return the status ``event`` moves a listing to, or raise ``Conflict``."""
    try:
        return TRANSITIONS[(status, event)]
    except KeyError:
        raise Conflict(f"Cannot {event} a listing that is {status}") from None
