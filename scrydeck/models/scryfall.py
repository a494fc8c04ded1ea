"""
Scryfall API objects.

Every Scryfall response body carries an `object` field naming its type.
The envelope is modelled as a closed discriminated union (ApiObject);
callers match on the concrete class and treat anything unexpected as an
ObjectNotCardError / ObjectNotListError.

API reference: https://scryfall.com/docs/api
"""

from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from scrydeck.models.identifier import CardIdentifier, identifier_from_payload
from scrydeck.services.token_handling import is_token


class ScryfallModel(BaseModel):
    """Base for Scryfall objects: unknown fields are ignored, aliases accepted."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ScryfallError(ScryfallModel):
    """Structured error returned instead of the requested object."""

    object: Literal["error"] = "error"
    status: int
    code: str
    details: str
    error_type: str | None = Field(default=None, alias="type")
    warnings: list[str] | None = None

    def __str__(self) -> str:
        parts = []
        if self.error_type:
            parts.append(f"type: {self.error_type}")
        if self.warnings:
            parts.append(f"warnings: {'; '.join(self.warnings)}")
        parts.append(f"details: {self.details}")
        return ", ".join(parts)


class ImageUris(ScryfallModel):
    small: str
    normal: str
    large: str
    art_crop: str
    border_crop: str
    png: str


class CardFace(ScryfallModel):
    """One face of a multi-faced card."""

    object: Literal["card_face"] = "card_face"
    name: str
    mana_cost: str = ""
    type_line: str | None = None
    oracle_id: UUID | None = None
    illustration_id: UUID | None = None
    image_uris: ImageUris | None = None


class RelatedCard(ScryfallModel):
    """Stub of a card related to another (tokens it makes, meld parts, ...)."""

    object: Literal["related_card"] = "related_card"
    id: UUID
    component: str
    name: str
    type_line: str = ""
    uri: str = ""

    @property
    def is_token(self) -> bool:
        return is_token(self.type_line, self.name, self.component)

    def __str__(self) -> str:
        return self.name


class Card(ScryfallModel):
    """
    A specific printing of a card.

    Two cards are equal when they share the Scryfall id; the remaining
    fields only describe that printing.
    """

    object: Literal["card"] = "card"
    id: UUID
    oracle_id: UUID | None = None
    mtgo_id: int | None = None
    multiverse_ids: list[int] | None = None
    illustration_id: UUID | None = None

    name: str
    lang: str = "en"
    layout: str = "normal"
    type_line: str | None = None
    set_code: str = Field(alias="set")
    set_name: str = ""
    collector_number: str

    all_parts: list[RelatedCard] | None = None
    card_faces: list[CardFace] | None = None
    image_uris: ImageUris | None = None

    prints_search_uri: str = ""
    scryfall_uri: str = ""

    @property
    def is_token(self) -> bool:
        return is_token(self.type_line, self.name)

    def sort_key(self) -> tuple[bool, str]:
        """Display order: regular cards before tokens, then by name."""
        return (self.is_token, self.name)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.name} ({self.set_code}) {self.collector_number}"


class CardList(ScryfallModel):
    """A page of objects, optionally with identifiers the catalog could not match."""

    object: Literal["list"] = "list"
    data: list["ApiObject"] = Field(default_factory=list)
    not_found: list[dict[str, Any]] | None = None
    has_more: bool | None = None
    next_page: str | None = None
    total_cards: int | None = None
    warnings: list[str] | None = None

    def not_found_identifiers(self) -> list[CardIdentifier]:
        return [identifier_from_payload(payload) for payload in self.not_found or []]


class DeckImageUris(ScryfallModel):
    front: str
    back: str | None = None


class CardDigest(ScryfallModel):
    """Condensed card data embedded in deck exports."""

    object: Literal["card_digest"] = "card_digest"
    id: UUID
    oracle_id: UUID | None = None
    name: str
    scryfall_uri: str = ""
    mana_cost: str = ""
    type_line: str = ""
    collector_number: str = ""
    set_code: str = Field(default="", alias="set")
    image_uris: DeckImageUris | None = None


class DeckEntry(ScryfallModel):
    object: Literal["deck_entry"] = "deck_entry"
    id: UUID
    deck_id: UUID
    section: str
    count: int
    cardinality: float = 0.0
    raw_text: str = ""
    found: bool = False
    printing_specified: bool = False
    finish: bool | str | None = None
    card_digest: CardDigest | None = None

    def __str__(self) -> str:
        return self.raw_text


class Deck(ScryfallModel):
    """A deck as exported from scryfall.com."""

    object: Literal["deck"] = "deck"
    id: UUID
    name: str
    format: str = ""
    layout: str = ""
    uri: str = ""
    scryfall_uri: str = ""
    description: str | None = None
    trashed: bool = False
    in_compliance: bool = True
    sections: dict[str, list[str]] = Field(default_factory=dict)
    entries: dict[str, list[DeckEntry]] = Field(default_factory=dict)


ApiObject = Annotated[
    ScryfallError | CardList | Card | CardFace | RelatedCard | Deck | DeckEntry | CardDigest,
    Field(discriminator="object"),
]

CardList.model_rebuild()

_api_object_adapter: TypeAdapter[ApiObject] = TypeAdapter(ApiObject)


def parse_api_object(payload: Any) -> ApiObject:
    """
    Validate a decoded JSON body into its API object class.

    Raises:
        pydantic.ValidationError: If the body is not a known API object
    """
    return _api_object_adapter.validate_python(payload)
