"""
Card image extraction.

Picks the image URLs to print for each card: one per face for double-faced
cards, the card's own image otherwise.
"""

import logging
from enum import Enum

from scrydeck.models.scryfall import Card, ImageUris

logger = logging.getLogger(__name__)


class ImageUriType(str, Enum):
    """Image sizes offered by Scryfall."""

    SMALL = "small"
    NORMAL = "normal"
    LARGE = "large"
    ART_CROP = "art_crop"
    BORDER_CROP = "border_crop"
    PNG = "png"


def image_url(images: ImageUris, image_type: ImageUriType) -> str:
    return str(getattr(images, image_type.value))


def is_basic_land(card: Card) -> bool:
    return (card.type_line or "").startswith("Basic Land")


def extract_images(
    cards: list[Card],
    exclude_basic_lands: bool = False,
    image_type: ImageUriType = ImageUriType.LARGE,
) -> list[tuple[Card, list[str]]]:
    """
    Collect image URLs for cards.

    Args:
        cards: Cards to print, one entry per physical copy
        exclude_basic_lands: Skip cards whose type line starts with "Basic Land"
        image_type: Which image size to use

    Returns:
        (card, face image URLs) for every card that has at least one image.
        Cards without any image are logged and left out.
    """
    images: list[tuple[Card, list[str]]] = []

    for card in cards:
        if exclude_basic_lands and is_basic_land(card):
            continue

        face_urls = [
            image_url(face.image_uris, image_type)
            for face in card.card_faces or []
            if face.image_uris is not None
        ]
        if card.image_uris is not None:
            face_urls.append(image_url(card.image_uris, image_type))

        if not face_urls:
            logger.error("Could not find image data for %s", card.name)
            continue

        images.append((card, face_urls))

    return images
