"""
Deck revision diff.

ResolvedCard equality ignores counts, so a plain set difference would see
"2 Lightning Bolt" and "3 Lightning Bolt" as the same entry. Each entry is
expanded into one slot per copy, keyed (copy index, card id), and the
slots are compared instead.
"""

from uuid import UUID

from scrydeck.models.resolved_card import DeckDiff, ResolvedCard
from scrydeck.models.scryfall import Card

_Slot = tuple[int, UUID]


def _expand_slots(deck: list[ResolvedCard]) -> dict[_Slot, Card]:
    slots: dict[_Slot, Card] = {}
    for entry in deck:
        for index in range(entry.count):
            slots[(index, entry.card.id)] = entry.card
    return slots


def diff_decks(old_deck: list[ResolvedCard], new_deck: list[ResolvedCard]) -> DeckDiff:
    """
    Compare two resolved revisions of a deck copy by copy.

    Args:
        old_deck: Previous revision
        new_deck: Current revision

    Returns:
        DeckDiff where every physical copy appears once:
        - unchanged: copies present in both revisions
        - added: copies only in the new revision
        - removed: copies only in the old revision

    Example:
        2 -> 3 copies of a card gives 1 added and 2 unchanged.
        3 -> 1 copies gives 2 removed and 1 unchanged.
    """
    old_slots = _expand_slots(old_deck)
    new_slots = _expand_slots(new_deck)

    return DeckDiff(
        unchanged=[card for slot, card in new_slots.items() if slot in old_slots],
        added=[card for slot, card in new_slots.items() if slot not in old_slots],
        removed=[card for slot, card in old_slots.items() if slot not in new_slots],
    )
