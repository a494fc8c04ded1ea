"""
Failure classification for deck resolution.

Every error the resolver can surface is a KnownError subclass, so the HTTP
layer and the CLI can report it without guessing at its cause.

Error taxonomy:
- CatalogTransportError: network failure, bad status, undecodable body
- CatalogApiError: the catalog answered with a structured error object
- ObjectNotCardError / ObjectNotListError: well-formed but wrong object type
- UnrecognisedIdentifierError: a not_found entry in no known identifier form
- InvalidCardIdentifierError: identifier kind not usable for a single lookup
- DeckParseError: decklist input could not be read at all

All of these are terminal. Recoverable anomalies (defaulted counts,
truncated pages, tokens without an oracle id) are logged, never raised.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from scrydeck.models.identifier import CardIdentifier
    from scrydeck.models.scryfall import ScryfallError


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Catalog failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"
    UNEXPECTED_OBJECT = "unexpected_object"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel):
    """Envelope for failures leaving the HTTP API; successes use the route models."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details",
    )

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """
        Create a known failure response.

        Use when the system knows exactly why the operation failed.
        Example: catalog returned an error object, malformed decklist.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse":
        """Create an unknown failure response (catch-all for unexpected exceptions)."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="I failed and I don't know why. Try again later.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class CatalogTransportError(KnownError):
    """The catalog could not be reached or its reply could not be decoded."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=message,
            detail=detail,
            suggestion="Check your connection and retry in a moment.",
            status_code=502,
        )


class CatalogApiError(KnownError):
    """The catalog answered with a structured error object."""

    def __init__(self, error: "ScryfallError"):
        self.error = error
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Received an error from an API request: {error}",
            detail=error.code,
            status_code=502,
        )


class UnexpectedObjectError(KnownError):
    """The catalog returned a well-formed object of the wrong type."""

    expected = "object"

    def __init__(self, received: Any):
        self.received = received
        received_type = getattr(received, "object", type(received).__name__)
        super().__init__(
            kind=FailureKind.UNEXPECTED_OBJECT,
            message=f"API returned object other than a {self.expected}: {received_type}",
            detail=str(received),
            status_code=502,
        )


class ObjectNotCardError(UnexpectedObjectError):
    """A card was expected."""

    expected = "card"


class ObjectNotListError(UnexpectedObjectError):
    """A list was expected."""

    expected = "list"


class InvalidCardIdentifierError(KnownError):
    """Oracle and illustration IDs cannot select a specific printing."""

    def __init__(self, identifier: "CardIdentifier"):
        self.identifier = identifier
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message="Oracle IDs and illustration IDs cannot be used to retrieve specific cards",
            detail=str(identifier),
            status_code=400,
        )


class DeckParseError(KnownError):
    """The decklist input could not be parsed."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=detail,
            suggestion="Paste a plain text decklist or a Scryfall deck JSON export.",
            status_code=400,
        )


class UnrecognisedIdentifierError(KnownError):
    """The catalog reported a not-found identifier in a form we never send."""

    def __init__(self, payload: dict[str, Any]):
        self.payload = payload
        super().__init__(
            kind=FailureKind.UNEXPECTED_OBJECT,
            message="API returned an unrecognised card identifier",
            detail=str(payload),
            status_code=502,
        )
