"""
Resolve a decklist file against Scryfall.

Prints the resolved cards, or with --old-deck the cards added and removed
between two revisions of the deck.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from scrydeck.models.failure import KnownError
from scrydeck.models.resolved_card import ResolvedCard, expand_cards
from scrydeck.models.scryfall import Card
from scrydeck.parsers.decklist import parse_decklist
from scrydeck.services.card_images import ImageUriType, extract_images
from scrydeck.services.catalog_client import CatalogClient, ScryfallClient
from scrydeck.services.deck_diff import diff_decks
from scrydeck.services.deck_resolver import DeckResolver

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("deck", type=Path, help="Decklist file (text or Scryfall JSON export)")
    parser.add_argument("--old-deck", type=Path, help="Previous revision to diff against")
    parser.add_argument(
        "--include-tokens", action="store_true", help="Also fetch tokens the cards create"
    )
    parser.add_argument(
        "--images", action="store_true", help="Print image URLs instead of card names"
    )
    parser.add_argument(
        "--exclude-basic-lands", action="store_true", help="Leave basic lands out of --images"
    )
    parser.add_argument(
        "--image-type",
        type=ImageUriType,
        choices=list(ImageUriType),
        default=ImageUriType.LARGE,
        help="Image size for --images",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser


async def resolve_file(
    client: CatalogClient, path: Path, include_tokens: bool = False
) -> list[ResolvedCard]:
    """Parse a decklist file and resolve it."""
    deck_list = parse_decklist(path.read_text(encoding="utf-8"))
    logger.info("Parsed %d distinct cards from %s", len(deck_list), path)
    return await DeckResolver(client).resolve(deck_list, fetch_related_tokens=include_tokens)


def format_cards(
    cards: list[Card],
    images: bool = False,
    exclude_basic_lands: bool = False,
    image_type: ImageUriType = ImageUriType.LARGE,
) -> list[str]:
    """One line per copy: the card, or its image URLs separated by spaces."""
    if not images:
        return [str(card) for card in cards]
    return [
        " ".join(face_urls)
        for _, face_urls in extract_images(cards, exclude_basic_lands, image_type)
    ]


async def run_fetch(args: argparse.Namespace, client: CatalogClient) -> list[str]:
    """Resolve (and optionally diff) the decks named in args, returning output lines."""
    new_deck = await resolve_file(client, args.deck, args.include_tokens)

    def render(cards: list[Card]) -> list[str]:
        return format_cards(
            sorted(cards, key=Card.sort_key),
            images=args.images,
            exclude_basic_lands=args.exclude_basic_lands,
            image_type=args.image_type,
        )

    if args.old_deck is None:
        if args.images:
            return render(expand_cards(new_deck))
        return [str(entry) for entry in sorted(new_deck)]

    old_deck = await resolve_file(client, args.old_deck, args.include_tokens)
    diff = diff_decks(old_deck, new_deck)
    logger.info(
        "%d cards added, %d removed, %d unchanged",
        len(diff.added),
        len(diff.removed),
        len(diff.unchanged),
    )

    return ["Added:", *render(diff.added), "", "Removed:", *render(diff.removed)]


async def run(args: argparse.Namespace) -> int:
    async with ScryfallClient() as client:
        try:
            lines = await run_fetch(args, client)
        except KnownError as e:
            logger.error("Failed to fetch deck: %s", e.message)
            if e.detail:
                logger.debug("Details: %s", e.detail)
            return 1

    for line in lines:
        print(line)
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
