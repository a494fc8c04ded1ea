"""
Card printings endpoint.

Lists every printing of a card with its images so a user can pick another
printing for a proxy.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from scrydeck.services.card_images import ImageUriType, extract_images
from scrydeck.services.catalog_client import CatalogClient, get_catalog_client
from scrydeck.services.printings import find_printing_index, get_all_printings

router = APIRouter(prefix="/cards", tags=["cards"])


class PrintingResponse(BaseModel):
    faces: list[str]
    set_name: str
    set: str
    collector_number: str
    scryfall_uri: str


class PrintingsResponse(BaseModel):
    """All printings of a card, with the position of the one on display."""

    card_name: str
    printings: list[PrintingResponse]
    current_index: int | None = None


@router.get("/printings", response_model=PrintingsResponse)
async def list_printings(
    prints_search_uri: str,
    card_name: str,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    image_type: Annotated[ImageUriType, Query()] = ImageUriType.LARGE,
    current_image: str | None = None,
) -> PrintingsResponse:
    """
    List the printings found at a card's prints_search_uri.

    current_index is set when current_image belongs to one of the printings.
    """
    printings = await get_all_printings(client, prints_search_uri, card_name)
    printing_images = extract_images(printings, image_type=image_type)

    current_index = None
    if current_image is not None:
        current_index = find_printing_index(printing_images, current_image)

    return PrintingsResponse(
        card_name=card_name,
        printings=[
            PrintingResponse(
                faces=faces,
                set_name=card.set_name,
                set=card.set_code,
                collector_number=card.collector_number,
                scryfall_uri=card.scryfall_uri,
            )
            for card, faces in printing_images
        ],
        current_index=current_index,
    )
