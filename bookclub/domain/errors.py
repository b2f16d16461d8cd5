"""Domain error codes for the book club."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    PURCHASE_NOT_FOUND = "PURCHASE_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_ACCESS_TOKEN = "UNKNOWN_ACCESS_TOKEN"
    PURCHASE_ALREADY_CLAIMED = "PURCHASE_ALREADY_CLAIMED"
    SESSION_IS_FULL = "SESSION_IS_FULL"
    ACCESS_NOT_GRANTED = "ACCESS_NOT_GRANTED"
    ACCESS_ALREADY_REQUESTED = "ACCESS_ALREADY_REQUESTED"
    INVALID_INVOICE_ID = "INVALID_INVOICE_ID"
    INVALID_SESSION_ID = "INVALID_SESSION_ID"
    INVALID_SESSION = "INVALID_SESSION"
    INVALID_ACCESS_REQUEST = "INVALID_ACCESS_REQUEST"


NOT_FOUND_CODES = frozenset(
    {
        ErrorCode.MEMBER_NOT_FOUND,
        ErrorCode.PURCHASE_NOT_FOUND,
        ErrorCode.SESSION_NOT_FOUND,
        ErrorCode.UNKNOWN_ACCESS_TOKEN,
    }
)

INVARIANT_CODES = frozenset(
    {
        ErrorCode.PURCHASE_ALREADY_CLAIMED,
        ErrorCode.SESSION_IS_FULL,
        ErrorCode.ACCESS_NOT_GRANTED,
        ErrorCode.ACCESS_ALREADY_REQUESTED,
    }
)


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class MemberNotFoundError(DomainError):
    """Raised when a member is not found."""

    def __init__(self, member_id: str) -> None:
        super().__init__(code=ErrorCode.MEMBER_NOT_FOUND, message="Member not found")
        self.member_id = member_id


class PurchaseNotFoundError(DomainError):
    """Raised when a purchase is not found."""

    def __init__(self, purchase_id: str) -> None:
        super().__init__(code=ErrorCode.PURCHASE_NOT_FOUND, message="Purchase not found")
        self.purchase_id = purchase_id


class SessionNotFoundError(DomainError):
    """Raised when a session is not found."""

    def __init__(self, session_id: str) -> None:
        super().__init__(code=ErrorCode.SESSION_NOT_FOUND, message="Session not found")
        self.session_id = session_id


class UnknownAccessTokenError(DomainError):
    """Raised when no member holds the given access token."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_ACCESS_TOKEN,
            message="Unknown access token",
        )


class PurchaseAlreadyClaimedError(DomainError):
    """Raised when a purchase was claimed before."""

    def __init__(self, purchase_id: str) -> None:
        super().__init__(
            code=ErrorCode.PURCHASE_ALREADY_CLAIMED,
            message="This purchase has already been claimed",
        )
        self.purchase_id = purchase_id


class SessionIsFullError(DomainError):
    """Raised when registering for a session that reached its maximum number of attendees."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_IS_FULL,
            message="The maximum number of attendees has been reached",
        )
        self.session_id = session_id


class AccessNotGrantedError(DomainError):
    def __init__(self, member_id: str) -> None:
        super().__init__(
            code=ErrorCode.ACCESS_NOT_GRANTED,
            message="Access has not been granted to this member",
        )
        self.member_id = member_id


class AccessAlreadyRequestedError(DomainError):
    def __init__(self, member_id: str) -> None:
        super().__init__(
            code=ErrorCode.ACCESS_ALREADY_REQUESTED,
            message="Access has already been requested for this invoice",
        )
        self.member_id = member_id


class InvalidInvoiceIdError(DomainError):
    """Raised when an invoice ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_INVOICE_ID,
            message="Invalid invoice ID format",
        )


class InvalidSessionIdError(DomainError):
    """Raised when a session ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SESSION_ID,
            message="Invalid session ID format",
        )


class InvalidSessionError(DomainError):
    """Raised when a session cannot be planned with the given details."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.INVALID_SESSION, message=reason)


class InvalidAccessRequestError(DomainError):
    """Raised when an access request carries an invalid email address or time zone."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ACCESS_REQUEST, message=reason)
