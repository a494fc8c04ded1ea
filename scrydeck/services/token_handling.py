"""
Token classification.

Scryfall marks related parts with a component ("token", "combo_piece",
"meld_part", ...), but emblems, helper cards and some tokens only show up
in the type line, so the type line is inspected as well.
"""

TOKEN_COMPONENT = "token"

# Any type line word containing one of these marks an auxiliary card
TOKEN_TYPE_WORDS = ("token", "emblem", "card")


def is_token(type_line: str | None, name: str, component: str | None = None) -> bool:
    """
    Decide whether a card or related-card stub is a token.

    Args:
        type_line: Type line of the card ("Token Creature — Goblin", "Emblem — Ajani")
        name: Card name, used to exclude checklist cards
        component: Related-card component tag, if the card is a stub

    Returns:
        True for tokens, emblems and helper cards.
        Checklist cards have "Card" in their type line but are not tokens.
    """
    if component == TOKEN_COMPONENT:
        return True

    is_checklist = "checklist" in name.lower()

    for word in (type_line or "").split():
        lowered = word.lower()
        for token_word in TOKEN_TYPE_WORDS:
            if token_word not in lowered:
                continue
            if token_word == "card" and is_checklist:
                continue
            return True

    return False
