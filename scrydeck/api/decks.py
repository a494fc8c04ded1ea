"""
Deck API endpoints.

Resolves pasted decklists against Scryfall and diffs two revisions of a deck.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from scrydeck.models.identifier import DeckList
from scrydeck.models.resolved_card import ResolvedCard
from scrydeck.models.scryfall import Card
from scrydeck.parsers.decklist import parse_decklist
from scrydeck.services.catalog_client import CatalogClient, get_catalog_client
from scrydeck.services.deck_diff import diff_decks
from scrydeck.services.deck_resolver import DeckResolver

router = APIRouter(prefix="/decks", tags=["decks"])

DeckFormat = Literal["auto", "text", "json"]


class CardSummary(BaseModel):
    """The parts of a Scryfall card a front end needs to render it."""

    id: str
    name: str
    set: str
    collector_number: str
    type_line: str | None = None
    is_token: bool = False
    scryfall_uri: str = ""
    prints_search_uri: str = ""

    @classmethod
    def from_card(cls, card: Card) -> "CardSummary":
        return cls(
            id=str(card.id),
            name=card.name,
            set=card.set_code,
            collector_number=card.collector_number,
            type_line=card.type_line,
            is_token=card.is_token,
            scryfall_uri=card.scryfall_uri,
            prints_search_uri=card.prints_search_uri,
        )


class ResolveDeckRequest(BaseModel):
    """Request model for resolving a decklist."""

    deck: str = Field(..., description="Plain text decklist or Scryfall deck JSON export")
    format: DeckFormat = Field(default="auto", description="Decklist format")
    include_tokens: bool = Field(default=False, description="Also fetch related tokens")


class ResolvedCardResponse(BaseModel):
    count: int
    card: CardSummary


class ResolveDeckResponse(BaseModel):
    """Response model for a resolved decklist."""

    cards: list[ResolvedCardResponse]
    total_cards: int
    unique_cards: int


class DiffDecksRequest(BaseModel):
    """Request model for comparing two revisions of a deck."""

    old_deck: str = Field(..., description="Previous revision of the decklist")
    new_deck: str = Field(..., description="Current revision of the decklist")
    format: DeckFormat = "auto"
    include_tokens: bool = False


class DiffDecksResponse(BaseModel):
    """One entry per physical copy in each list."""

    added: list[CardSummary]
    removed: list[CardSummary]
    unchanged: list[CardSummary]


def _parse_or_reject(text: str, deck_format: DeckFormat) -> DeckList:
    deck_list = parse_decklist(text, deck_format)
    if not deck_list:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid cards found in decklist",
        )
    return deck_list


def _summaries(cards: list[Card]) -> list[CardSummary]:
    return [CardSummary.from_card(card) for card in sorted(cards, key=Card.sort_key)]


@router.post("/resolve", response_model=ResolveDeckResponse)
async def resolve_deck(
    request: ResolveDeckRequest,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> ResolveDeckResponse:
    """
    Resolve a decklist to Scryfall cards.

    Cards are returned in display order (regular cards before tokens, then
    by name). Any catalog failure fails the whole request.
    """
    deck_list = _parse_or_reject(request.deck, request.format)

    resolved: list[ResolvedCard] = await DeckResolver(client).resolve(
        deck_list, fetch_related_tokens=request.include_tokens
    )

    return ResolveDeckResponse(
        cards=[
            ResolvedCardResponse(count=entry.count, card=CardSummary.from_card(entry.card))
            for entry in sorted(resolved)
        ],
        total_cards=sum(entry.count for entry in resolved),
        unique_cards=len(resolved),
    )


@router.post("/diff", response_model=DiffDecksResponse)
async def diff_deck_revisions(
    request: DiffDecksRequest,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> DiffDecksResponse:
    """
    Compare two revisions of a deck copy by copy.

    Going from 2 to 3 copies of a card reports one added copy and two
    unchanged ones.
    """
    old_deck_list = _parse_or_reject(request.old_deck, request.format)
    new_deck_list = _parse_or_reject(request.new_deck, request.format)

    resolver = DeckResolver(client)
    old_cards = await resolver.resolve(old_deck_list, fetch_related_tokens=request.include_tokens)
    new_cards = await resolver.resolve(new_deck_list, fetch_related_tokens=request.include_tokens)

    diff = diff_decks(old_cards, new_cards)

    return DiffDecksResponse(
        added=_summaries(diff.added),
        removed=_summaries(diff.removed),
        unchanged=_summaries(diff.unchanged),
    )
