class MarketplaceError(Exception):
    """Base for errors the marketplace reports back to the caller.

    ``status_code`` is the HTTP status the API answers with.
    """

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(MarketplaceError):
    status_code = 401
    default_detail = "Not authenticated"


class Unauthorized(MarketplaceError):
    status_code = 403
    default_detail = "Not authorized"


class NotFound(MarketplaceError):
    status_code = 404
    default_detail = "Not found"


class Conflict(MarketplaceError):
    status_code = 409
    default_detail = "Listing state changed, try again"


class InvalidArgument(MarketplaceError):
    status_code = 400
    default_detail = "Invalid request"


class SelfClaim(InvalidArgument):
    default_detail = "You cannot claim your own listing"


class ListingUnavailable(Conflict):
    status_code = 400
    default_detail = "Item is no longer available"


class ClaimMismatch(Conflict):
    status_code = 400
    default_detail = "Claim does not belong to this listing"
