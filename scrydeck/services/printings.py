"""
Card printings lookup.

Lists every printing of a card (from its prints_search_uri) so a user can
swap the printing used for a proxy.
"""

import logging

from scrydeck.models.failure import ObjectNotCardError
from scrydeck.models.scryfall import Card
from scrydeck.services.catalog_client import CatalogClient

logger = logging.getLogger(__name__)


async def get_all_printings(
    client: CatalogClient,
    prints_search_uri: str,
    card_name: str,
) -> list[Card]:
    """
    Fetch every printing of a card.

    Args:
        client: Catalog client
        prints_search_uri: The card's prints_search_uri from Scryfall
        card_name: Used for logging only

    Returns:
        All printings across every result page

    Raises:
        ObjectNotCardError: If a result is not a card
    """
    logger.info("Sending API request for all printings of %s", card_name)

    printings: list[Card] = []
    for api_object in await client.resolve_multi_page(prints_search_uri):
        match api_object:
            case Card():
                printings.append(api_object)
            case _:
                raise ObjectNotCardError(api_object)

    return printings


def find_printing_index(
    printing_images: list[tuple[Card, list[str]]],
    current_image: str,
) -> int | None:
    """
    Position of the printing showing a given image.

    Args:
        printing_images: Output of extract_images for the printings
        current_image: Image URL currently displayed

    Returns:
        Index into printing_images, or None if no printing uses current_image
    """
    for index, (_, face_urls) in enumerate(printing_images):
        if current_image in face_urls:
            return index
    return None
