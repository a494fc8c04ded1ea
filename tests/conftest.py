from collections.abc import Callable, Sequence
from typing import Any
from uuid import UUID, uuid4

import pytest

from scrydeck.models.identifier import CardIdentifier
from scrydeck.models.scryfall import ApiObject, Card, CardList, parse_api_object

CardFactory = Callable[..., Card]


def image_uris(slug: str) -> dict[str, str]:
    """A full image_uris block whose URLs all contain slug."""
    return {
        size: f"https://cards.scryfall.io/{size}/{slug}.jpg"
        for size in ("small", "normal", "large", "art_crop", "border_crop", "png")
    }


def card_payload(
    name: str,
    set_code: str = "lea",
    collector_number: str = "1",
    type_line: str = "Instant",
    **fields: Any,
) -> dict[str, Any]:
    """JSON body of a card as Scryfall returns it."""
    payload: dict[str, Any] = {
        "object": "card",
        "id": str(fields.pop("id", None) or uuid4()),
        "oracle_id": fields.pop("oracle_id", uuid4()),
        "name": name,
        "set": set_code,
        "set_name": fields.pop("set_name", set_code.upper()),
        "collector_number": collector_number,
        "type_line": type_line,
        "scryfall_uri": f"https://scryfall.com/card/{set_code}/{collector_number}",
        "prints_search_uri": f"https://api.scryfall.com/cards/search?q=oracleid%3A{name}",
        "image_uris": image_uris(f"{set_code}-{collector_number}"),
    }
    payload.update(fields)
    return {
        key: str(value) if isinstance(value, UUID) else value
        for key, value in payload.items()
        if value is not None
    }


@pytest.fixture
def make_card() -> CardFactory:
    """Build Card models with sensible defaults; pass None to drop a field."""

    def factory(name: str = "Lightning Bolt", **kwargs: Any) -> Card:
        card = parse_api_object(card_payload(name, **kwargs))
        assert isinstance(card, Card)
        return card

    return factory


@pytest.fixture
def lightning_bolt(make_card: CardFactory) -> Card:
    return make_card(
        "Lightning Bolt",
        set_code="lea",
        collector_number="161",
        id=UUID("e3285e6b-3e79-4d7c-bf96-d920f973b122"),
        mtgo_id=12345,
        multiverse_ids=[209],
    )


@pytest.fixture
def goblin_token(make_card: CardFactory) -> Card:
    return make_card(
        "Goblin",
        set_code="tm10",
        collector_number="5",
        type_line="Token Creature — Goblin",
    )


class FakeCatalogClient:
    """
    In-memory CatalogClient.

    Collection requests answer from `cards` keyed by identifier; anything
    missing is reported in not_found. Single lookups answer from `fuzzy`.
    Every call is recorded for assertions.
    """

    def __init__(
        self,
        cards: dict[CardIdentifier, Card] | None = None,
        fuzzy: dict[CardIdentifier, ApiObject] | None = None,
        pages: dict[str, list[ApiObject]] | None = None,
    ) -> None:
        self.cards = cards or {}
        self.fuzzy = fuzzy or {}
        self.pages = pages or {}
        self.collection_calls: list[list[CardIdentifier]] = []
        self.card_calls: list[CardIdentifier] = []
        self.collection_errors: dict[int, Exception] = {}
        self.collection_overrides: dict[int, ApiObject] = {}

    async def get_card(self, identifier: CardIdentifier) -> ApiObject:
        self.card_calls.append(identifier)
        return self.fuzzy[identifier]

    async def get_cards_from_list(self, identifiers: Sequence[CardIdentifier]) -> ApiObject:
        call_index = len(self.collection_calls)
        self.collection_calls.append(list(identifiers))

        if call_index in self.collection_errors:
            raise self.collection_errors[call_index]
        if call_index in self.collection_overrides:
            return self.collection_overrides[call_index]

        data: list[ApiObject] = []
        not_found: list[dict[str, Any]] = []
        for identifier in identifiers:
            if identifier in self.cards:
                data.append(self.cards[identifier])
            else:
                not_found.append(identifier.to_payload())

        return CardList(data=data, not_found=not_found)

    async def resolve_multi_page(self, url: str) -> list[ApiObject]:
        return self.pages[url]


@pytest.fixture
def fake_client() -> FakeCatalogClient:
    return FakeCatalogClient()
