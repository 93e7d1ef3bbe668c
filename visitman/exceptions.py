"""Visitman exceptions."""


class BaseError(Exception):
    """
    Structured exception carrying a machine-readable code.

    Subclasses declare ``_default_messages`` mapping codes to messages.
    Extra keyword arguments become ``data`` (context for callers/logs).
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class VisitmanError(BaseError):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            LedgerService.check_in(business_id, phone)
        except VisitmanError as e:
            if e.code == "INVALID_PHONE_FORMAT":
                ask_for_correction(e.data["phone"])
    """

    _default_messages = {
        "INVALID_PHONE_FORMAT": "Phone number must contain exactly 10 digits",
        "UNKNOWN_CUSTOMER": "Customer not found",
        "RESOLUTION_CONFLICT": "Customer could not be resolved after a concurrent insert",
        "STORE_UNAVAILABLE": "Event store unavailable",
        "UNIQUE_CONSTRAINT_VIOLATION": "Customer phone already exists for this business",
        "FOREIGN_KEY_VIOLATION": "Referenced customer does not exist",
        "BUSINESS_NOT_FOUND": "Business not found",
        "PHONE_IMMUTABLE": "Customer phone cannot be changed",
        "INVALID_REWARD_TIERS": "Invalid reward tier configuration",
        "REWARD_NOT_UNLOCKED": "Reward tier not unlocked yet",
        "REWARD_ALREADY_CLAIMED": "Reward tier already claimed",
    }


class _CodedError(VisitmanError):
    """VisitmanError bound to a single code."""

    default_code = ""

    def __init__(self, message: str | None = None, **data):
        super().__init__(self.default_code, message=message, **data)


class InvalidPhoneFormat(_CodedError):
    """Caller input error. Surfaced for correction, never retried."""

    default_code = "INVALID_PHONE_FORMAT"


class UnknownCustomer(_CodedError):
    """Check-in referenced a customer that does not exist."""

    default_code = "UNKNOWN_CUSTOMER"


class ResolutionConflict(_CodedError):
    """Customer insert collided and the retry lookup found nothing."""

    default_code = "RESOLUTION_CONFLICT"


class StoreUnavailable(_CodedError):
    """Transport/infrastructure failure in the event store."""

    default_code = "STORE_UNAVAILABLE"


class UniqueConstraintViolation(_CodedError):
    """Store-level: (business, phone) already taken."""

    default_code = "UNIQUE_CONSTRAINT_VIOLATION"


class ForeignKeyViolation(_CodedError):
    """Store-level: check-in references a missing customer."""

    default_code = "FOREIGN_KEY_VIOLATION"
