"""
Card count reconciliation.

Maps a card returned by Scryfall back to the number of copies the user
asked for. The printing Scryfall returns rarely carries the identifier the
user typed (a bare name comes back as a specific set and collector number),
so every identity the card exposes is tried in a fixed priority order.
"""

import logging
from collections.abc import Iterator

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
)
from scrydeck.models.scryfall import Card

logger = logging.getLogger(__name__)


def candidate_identifiers(card: Card) -> Iterator[CardIdentifier]:
    """
    Identifiers derivable from a card, most specific first.

    Order: id, collector number + set, MTGO id, multiverse ids (list order),
    oracle id, illustration id, name + set, name.
    """
    yield CardId(card.id)
    yield CollectorNumberSet(card.collector_number, card.set_code)
    if card.mtgo_id is not None:
        yield MtgoId(card.mtgo_id)
    for multiverse_id in card.multiverse_ids or []:
        yield MultiverseId(multiverse_id)
    if card.oracle_id is not None:
        yield OracleId(card.oracle_id)
    if card.illustration_id is not None:
        yield IllustrationId(card.illustration_id)
    yield NameSet(card.name, card.set_code)
    yield Name(card.name)


def count_for(deck_list: DeckList, card: Card) -> int | None:
    """
    Requested copies of a card, or None if no identity of it was requested.

    Args:
        deck_list: Identifier -> requested count
        card: Card returned by the catalog

    Returns:
        Count of the first matching identifier in priority order
    """
    for identifier in candidate_identifiers(card):
        count = deck_list.get(identifier)
        if count is not None:
            return count
    return None


def resolve_count(deck_list: DeckList, card: Card) -> int:
    """
    Requested copies of a card, defaulting to one.

    Tokens legitimately arrive without being requested, so only non-token
    misses are reported.
    """
    count = count_for(deck_list, card)
    if count is not None:
        return count

    if not card.is_token:
        logger.warning("Could not find card %s on the deck list, assuming it has one copy", card)
    return 1
