"""
Deck resolution.

Turns a decklist (identifier -> requested count) into catalog cards:

1. Batch: identifiers are split into /cards/collection sized chunks which
   are all requested concurrently.
2. Reconcile: every returned card is matched back to its requested count.
3. Fuzzy fallback: identifiers Scryfall could not match are looked up one
   at a time by closest match.
4. Tokens (optional): tokens referenced by the resolved cards are fetched in
   one extra pass, without looking for tokens of tokens.

INVARIANTS:
1. Every requested identifier ends up in the result exactly once, or the
   whole resolution fails
2. The first catalog error aborts the resolution; nothing is retried
3. The token pass runs at most once per resolution
"""

import asyncio
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID

from scrydeck.config import MAX_COLLECTION_BATCH_SIZE
from scrydeck.models.failure import ObjectNotCardError, ObjectNotListError
from scrydeck.models.identifier import CardId, CardIdentifier, DeckList
from scrydeck.models.resolved_card import ResolvedCard
from scrydeck.models.scryfall import ApiObject, Card, CardList
from scrydeck.services.card_counts import resolve_count
from scrydeck.services.catalog_client import CatalogClient

logger = logging.getLogger(__name__)


def chunk_identifiers(
    identifiers: Sequence[CardIdentifier],
    max_chunk_size: int = MAX_COLLECTION_BATCH_SIZE,
) -> list[list[CardIdentifier]]:
    """
    Split identifiers into the fewest chunks of at most max_chunk_size.

    Chunk sizes differ by at most one, so 76 identifiers become 38 + 38
    rather than 75 + 1.

    Returns:
        ceil(len / max_chunk_size) chunks, empty list for no identifiers
    """
    if not identifiers:
        return []

    num_chunks = math.ceil(len(identifiers) / max_chunk_size)
    base_size, remainder = divmod(len(identifiers), num_chunks)

    chunks: list[list[CardIdentifier]] = []
    start = 0
    for index in range(num_chunks):
        size = base_size + (1 if index < remainder else 0)
        chunks.append(list(identifiers[start : start + size]))
        start += size

    return chunks


def related_token_ids(card: Card) -> list[UUID]:
    """Ids of the related parts of a card that are tokens."""
    return [related.id for related in card.all_parts or [] if related.is_token]


def dedupe_tokens(tokens: list[ResolvedCard]) -> list[ResolvedCard]:
    """
    Keep one token per oracle id.

    Different cards can create the same token from different printings, so
    tokens are compared across prints. Tokens without an oracle id cannot
    be compared and are dropped.
    """
    by_oracle_id: dict[UUID, ResolvedCard] = {}

    for token in tokens:
        oracle_id = token.card.oracle_id
        if oracle_id is None:
            logger.warning(
                "Dropping token %s as it has no oracle ID (Scryfall URL: %s)",
                token.card.name,
                token.card.scryfall_uri,
            )
            continue
        by_oracle_id.setdefault(oracle_id, token)

    return list(by_oracle_id.values())


@dataclass
class _ResolutionPass:
    """Accumulators for one pass over a decklist."""

    matched: list[ResolvedCard] = field(default_factory=list)
    fuzzy_matched: list[ResolvedCard] = field(default_factory=list)
    not_found: list[CardIdentifier] = field(default_factory=list)
    token_deck: DeckList = field(default_factory=dict)

    def collect_tokens(self, card: Card) -> None:
        for token_id in related_token_ids(card):
            self.token_deck[CardId(token_id)] = 1

    @property
    def cards(self) -> list[ResolvedCard]:
        return self.matched + self.fuzzy_matched


class DeckResolver:
    """
    Resolves decklists against a CatalogClient.

    The client is only used through its protocol; pacing and transport
    concerns stay inside it.
    """

    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    async def resolve(
        self,
        deck_list: DeckList,
        fetch_related_tokens: bool = False,
    ) -> list[ResolvedCard]:
        """
        Resolve every card of a decklist.

        Args:
            deck_list: Identifier -> requested copy count
            fetch_related_tokens: Also fetch tokens the deck's cards create

        Returns:
            Batch-matched cards, then fuzzy matches, then deduplicated tokens.
            Order within each group follows completion order, so sort before
            displaying.

        Raises:
            KnownError: The first catalog, transport or object-type error met
        """
        if not deck_list:
            return []

        deck_pass = await self._resolve_pass(deck_list, collect_tokens=fetch_related_tokens)
        cards = deck_pass.cards

        if fetch_related_tokens and deck_pass.token_deck:
            # Tokens never reference further tokens, so this pass collects none
            token_pass = await self._resolve_pass(deck_pass.token_deck, collect_tokens=False)
            cards.extend(dedupe_tokens(token_pass.cards))

        return cards

    async def fuzzy_resolve(
        self,
        deck_list: DeckList,
        identifier: CardIdentifier,
    ) -> ResolvedCard:
        """
        Resolve one identifier by closest match.

        Raises:
            InvalidCardIdentifierError: For oracle and illustration IDs
            ObjectNotCardError: If the catalog returns anything but a card
        """
        count = deck_list.get(identifier)
        if count is None:
            logger.warning(
                "Could not find card %s on the deck list, assuming it has one copy", identifier
            )
            count = 1

        api_object = await self._client.get_card(identifier)

        match api_object:
            case Card():
                card = api_object
            case _:
                raise ObjectNotCardError(api_object)

        logger.warning(
            "%s did not match any card directly, using closest match: %s", identifier, card.name
        )
        return ResolvedCard(count=count, card=card)

    async def _resolve_pass(self, deck_list: DeckList, collect_tokens: bool) -> _ResolutionPass:
        resolution = _ResolutionPass()

        chunks = chunk_identifiers(list(deck_list))
        # Every chunk request runs to completion before the first error is raised
        responses = await asyncio.gather(
            *(self._client.get_cards_from_list(chunk) for chunk in chunks),
            return_exceptions=True,
        )

        for response in responses:
            if isinstance(response, BaseException):
                raise response
            self._accept_chunk(resolution, deck_list, response, collect_tokens)

        for identifier in resolution.not_found:
            resolved = await self.fuzzy_resolve(deck_list, identifier)
            if collect_tokens:
                resolution.collect_tokens(resolved.card)
            resolution.fuzzy_matched.append(resolved)

        return resolution

    def _accept_chunk(
        self,
        resolution: _ResolutionPass,
        deck_list: DeckList,
        response: ApiObject,
        collect_tokens: bool,
    ) -> None:
        match response:
            case CardList():
                card_list = response
            case _:
                raise ObjectNotListError(response)

        resolution.not_found.extend(card_list.not_found_identifiers())

        for api_object in card_list.data:
            match api_object:
                case Card():
                    card = api_object
                case _:
                    raise ObjectNotCardError(api_object)

            if collect_tokens:
                resolution.collect_tokens(card)
            resolution.matched.append(ResolvedCard(count=resolve_count(deck_list, card), card=card))
