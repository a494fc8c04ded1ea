"""
Resolved deck entries.

INVARIANTS:
- A ResolvedCard always holds at least one copy
- ResolvedCard equality and hashing use the card id only, never the count
- Resolved lists are only extended (token pass), never edited in place
"""

from dataclasses import dataclass, field
from typing import Any

from scrydeck.models.scryfall import Card


@dataclass(frozen=True, slots=True, eq=False)
class ResolvedCard:
    """
    A catalog card paired with the number of copies requested.

    Attributes:
        count: Copies requested in the decklist (>= 1)
        card: The printing Scryfall resolved the request to
    """

    count: int
    card: Card

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"ResolvedCard count must be at least 1, got {self.count}")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ResolvedCard):
            return NotImplemented
        return self.card.id == other.card.id

    def __hash__(self) -> int:
        return hash(self.card.id)

    def __lt__(self, other: "ResolvedCard") -> bool:
        return self.card.sort_key() < other.card.sort_key()

    def __str__(self) -> str:
        return f"{self.count} {self.card.name}"


@dataclass
class DeckDiff:
    """Cards added, removed and kept between two revisions of a deck."""

    unchanged: list[Card] = field(default_factory=list)
    added: list[Card] = field(default_factory=list)
    removed: list[Card] = field(default_factory=list)


def expand_cards(resolved: list[ResolvedCard]) -> list[Card]:
    """
    One Card per physical copy, in display order.

    Args:
        resolved: Resolved deck entries

    Returns:
        Cards repeated by their count, regular cards before tokens, then by name
    """
    cards = [entry.card for entry in resolved for _ in range(entry.count)]
    return sorted(cards, key=Card.sort_key)
