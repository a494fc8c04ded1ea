from scrydeck.parsers.decklist import (
    parse_decklist,
    parse_json_decklist,
    parse_text_decklist,
)

__all__ = [
    "parse_decklist",
    "parse_json_decklist",
    "parse_text_decklist",
]
