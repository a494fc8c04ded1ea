from scrydeck.models.failure import (
    ApiResponse,
    CatalogApiError,
    CatalogTransportError,
    DeckParseError,
    FailureDetail,
    FailureKind,
    InvalidCardIdentifierError,
    KnownError,
    ObjectNotCardError,
    ObjectNotListError,
    OutcomeType,
    UnexpectedObjectError,
    UnrecognisedIdentifierError,
)
from scrydeck.models.identifier import (
    CardId,
    CardIdentifier,
    CollectorNumberSet,
    DeckList,
    IllustrationId,
    MtgoId,
    MultiverseId,
    Name,
    NameSet,
    OracleId,
    identifier_from_payload,
)
from scrydeck.models.resolved_card import DeckDiff, ResolvedCard, expand_cards
from scrydeck.models.scryfall import (
    ApiObject,
    Card,
    CardDigest,
    CardFace,
    CardList,
    Deck,
    DeckEntry,
    ImageUris,
    RelatedCard,
    ScryfallError,
    parse_api_object,
)

__all__ = [
    "ApiObject",
    "ApiResponse",
    "Card",
    "CardDigest",
    "CardFace",
    "CardId",
    "CardIdentifier",
    "CardList",
    "CatalogApiError",
    "CatalogTransportError",
    "CollectorNumberSet",
    "Deck",
    "DeckDiff",
    "DeckEntry",
    "DeckList",
    "DeckParseError",
    "FailureDetail",
    "FailureKind",
    "IllustrationId",
    "ImageUris",
    "InvalidCardIdentifierError",
    "KnownError",
    "MtgoId",
    "MultiverseId",
    "Name",
    "NameSet",
    "ObjectNotCardError",
    "ObjectNotListError",
    "OracleId",
    "OutcomeType",
    "RelatedCard",
    "ResolvedCard",
    "ScryfallError",
    "UnexpectedObjectError",
    "UnrecognisedIdentifierError",
    "expand_cards",
    "identifier_from_payload",
    "parse_api_object",
]
