"""
Decklist parsers.

Text format (one card per line, everything after the name optional):
    <count> [<SET>#<number>] <card name> (<SET>) <number> *F* <tags> #comment

Examples:
    4 Lightning Bolt
    1 [LCI] Anim Pakal, Thousandth Moon
    1 [LCI#223] Anim Pakal, Thousandth Moon <cost={WU}{U}> #comment
    1 Lae'zel, Vlaakith's Champion (CLB) 29

Section headers ("Main", "Sideboard"), blank lines and "//" comments do not
start with a count and are skipped.

JSON format: a deck exported from scryfall.com. Every section except the
maybeboard is included and cards are identified by their Scryfall id.
"""

import logging
import re
from typing import Literal

from pydantic import ValidationError

from scrydeck.models.failure import DeckParseError
from scrydeck.models.identifier import (
    CardId,
    CardIdentifier,
    CollectorNumberSet,
    DeckList,
    Name,
    NameSet,
)
from scrydeck.models.scryfall import Deck

logger = logging.getLogger(__name__)

# Groups: count, set / collector_number (bracket form), name,
# arena_set / arena_collector_number (parenthesised form)
DECKLIST_LINE_PATTERN = re.compile(
    r"^(?P<count>\d+)\s+"
    r"(?:\[(?P<set>[^\]\s#]+)(?:#(?P<collector_number>[^\]\s]+))?\]\s+)?"
    r"(?P<name>.+?)"
    r"(?:\s+\((?P<arena_set>[^)\s]+)\)\s+(?P<arena_collector_number>\S+))?"
    r"(?:\s+\*F\*)?"
    r"(?:\s+<.*>)?"
    r"(?:\s+#.*)?$"
)

# Deck export sections that are not part of the deck
EXCLUDED_SECTIONS = frozenset({"maybeboard"})


def _add(deck_list: DeckList, identifier: CardIdentifier, count: int) -> None:
    # The same card on several lines (main deck and sideboard) adds up
    deck_list[identifier] = deck_list.get(identifier, 0) + count


def parse_text_decklist(text: str) -> DeckList:
    """
    Parse a plain text decklist.

    Args:
        text: Raw decklist text

    Returns:
        Identifier -> count. Set and collector number give a
        CollectorNumberSet, a set alone gives a NameSet, otherwise a Name.
        Empty dict if nothing matched.
    """
    deck_list: DeckList = {}

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        match = DECKLIST_LINE_PATTERN.match(line)
        if match is None:
            continue

        count = int(match.group("count"))
        if count == 0:
            continue

        name = match.group("name").strip()
        set_code = match.group("set") or match.group("arena_set")
        collector_number = match.group("collector_number") or match.group(
            "arena_collector_number"
        )

        identifier: CardIdentifier
        if set_code and collector_number:
            identifier = CollectorNumberSet(collector_number, set_code)
        elif set_code:
            identifier = NameSet(name, set_code)
        else:
            identifier = Name(name)

        _add(deck_list, identifier, count)

    return deck_list


def parse_json_decklist(text: str) -> DeckList:
    """
    Parse a deck exported from scryfall.com as JSON.

    Raises:
        DeckParseError: If the text is not a deck export
    """
    try:
        deck = Deck.model_validate_json(text)
    except ValidationError as e:
        raise DeckParseError("Could not read the deck JSON export", detail=str(e)) from e

    deck_list: DeckList = {}

    for section_name, entries in deck.entries.items():
        if section_name in EXCLUDED_SECTIONS:
            continue

        for entry in entries:
            if entry.card_digest is not None:
                if entry.count > 0:
                    _add(deck_list, CardId(entry.card_digest.id), entry.count)
                continue

            # Unfound entries are placeholders the user never resolved
            if entry.found:
                logger.error("Could not find ID for card %s", entry.raw_text)

    return deck_list


def parse_decklist(text: str, format: Literal["auto", "text", "json"] = "auto") -> DeckList:
    """
    Parse a decklist in either supported format.

    Args:
        text: Decklist text or deck JSON
        format: "auto" picks JSON when the text starts with "{"

    Raises:
        DeckParseError: If JSON input is not a deck export
    """
    if format == "auto":
        format = "json" if text.lstrip().startswith("{") else "text"

    if format == "json":
        return parse_json_decklist(text)
    return parse_text_decklist(text)
