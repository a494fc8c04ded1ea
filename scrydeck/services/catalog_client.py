"""
Scryfall catalog client.

The resolver only depends on the CatalogClient protocol; ScryfallClient is
the httpx implementation used in production.

Respects Scryfall rate limits (10 requests/second by default).
API docs: https://scryfall.com/docs/api/cards
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from types import TracebackType
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from scrydeck.config import settings
from scrydeck.models.failure import (
    CatalogApiError,
    CatalogTransportError,
    InvalidCardIdentifierError,
    ObjectNotListError,
)
from scrydeck.models.identifier import (
    CardId,
    CardIdentifier,
    CollectorNumberSet,
    MtgoId,
    MultiverseId,
    Name,
    NameSet,
)
from scrydeck.models.scryfall import ApiObject, CardList, ScryfallError, parse_api_object

logger = logging.getLogger(__name__)

NAMED_CARD_PATH = "/cards/named"
CARD_PATH = "/cards"
MULTIVERSE_CARD_PATH = "/cards/multiverse"
MTGO_CARD_PATH = "/cards/mtgo"
CARD_COLLECTION_PATH = "/cards/collection"


class CatalogClient(Protocol):
    """Operations the deck resolver needs from the card catalog."""

    async def get_card(self, identifier: CardIdentifier) -> ApiObject:
        """Fetch a single card; error objects raise CatalogApiError."""
        ...

    async def get_cards_from_list(self, identifiers: Sequence[CardIdentifier]) -> ApiObject:
        """Fetch up to 75 cards in one request."""
        ...

    async def resolve_multi_page(self, url: str) -> list[ApiObject]:
        """Fetch a paginated search and concatenate every page."""
        ...


class ScryfallClient:
    """
    httpx-backed CatalogClient.

    Use as an async context manager, or call aclose() when done:

        async with ScryfallClient() as client:
            card = await client.get_card(Name("Lightning Bolt"))
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        requests_per_second: float | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            http_client: Optional httpx client for connection reuse.
                         A private one is created (and closed) otherwise.
            base_url: Catalog root, defaults to settings.scryfall_api_url
            requests_per_second: Pacing limit, defaults to settings.requests_per_second
        """
        self._base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=True,
        )
        self._headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        }

        rate = settings.requests_per_second if requests_per_second is None else requests_per_second
        self._min_interval = 1.0 / rate if rate > 0 else 0.0
        self._throttle_lock = asyncio.Lock()
        self._last_request_at: float | None = None

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def _throttle(self) -> None:
        """Space request starts at least _min_interval apart."""
        async with self._throttle_lock:
            loop = asyncio.get_running_loop()
            if self._last_request_at is not None:
                wait = self._last_request_at + self._min_interval - loop.time()
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_request_at = loop.time()

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> ApiObject:
        """
        Send one request and decode the API object in the body.

        Raises:
            CatalogTransportError: Network failure, undecodable body, or an
                error status without an error object
            CatalogApiError: The body is a Scryfall error object
        """
        await self._throttle()

        try:
            response = await self._http_client.request(
                method, url, params=params, json=json, headers=self._headers
            )
        except httpx.HTTPError as e:
            raise CatalogTransportError(f"Request to {url} failed: {e}") from e

        try:
            api_object = parse_api_object(response.json())
        except (ValueError, ValidationError) as e:
            raise CatalogTransportError(
                f"Could not decode response from {url} (HTTP {response.status_code})",
                detail=str(e),
            ) from e

        if isinstance(api_object, ScryfallError):
            raise CatalogApiError(api_object)

        if response.is_error:
            raise CatalogTransportError(f"Request to {url} failed: HTTP {response.status_code}")

        return api_object

    async def get_card(self, identifier: CardIdentifier) -> ApiObject:
        """
        Fetch the card one identifier points at.

        Names are looked up fuzzily, so a misspelled name still resolves to
        the closest match.

        Raises:
            InvalidCardIdentifierError: For oracle and illustration IDs
            CatalogApiError: If Scryfall answers with an error object
            CatalogTransportError: On network or decoding failures
        """
        if not identifier.supports_direct_lookup:
            raise InvalidCardIdentifierError(identifier)

        params: dict[str, str] | None = None

        match identifier:
            case CardId(id=card_id):
                path = f"{CARD_PATH}/{card_id}"
            case MtgoId(mtgo_id=mtgo_id):
                path = f"{MTGO_CARD_PATH}/{mtgo_id}"
            case MultiverseId(multiverse_id=multiverse_id):
                path = f"{MULTIVERSE_CARD_PATH}/{multiverse_id}"
            case CollectorNumberSet(collector_number=number, set_code=set_code):
                path = f"{CARD_PATH}/{quote(set_code.lower(), safe='')}/{quote(number, safe='')}"
            case NameSet(name=name, set_code=set_code):
                path = NAMED_CARD_PATH
                params = {"fuzzy": name, "set": set_code}
            case Name(name=name):
                path = NAMED_CARD_PATH
                params = {"fuzzy": name}
            case _:
                raise TypeError(f"Unsupported card identifier: {identifier!r}")

        logger.info("Sending API request for card %s", identifier)
        return await self._request("GET", f"{self._base_url}{path}", params=params)

    async def get_cards_from_list(self, identifiers: Sequence[CardIdentifier]) -> ApiObject:
        """
        Fetch up to 75 cards with one /cards/collection request.

        Returns:
            Normally a CardList whose not_found holds unmatched identifiers
        """
        payload = {"identifiers": [identifier.to_payload() for identifier in identifiers]}

        logger.info("Sending API request for %d cards", len(identifiers))
        return await self._request("POST", f"{self._base_url}{CARD_COLLECTION_PATH}", json=payload)

    async def resolve_multi_page(self, url: str) -> list[ApiObject]:
        """
        Follow a paginated search until the last page.

        A page claiming more results without a next_page URL ends the walk
        with a warning instead of an error.

        Raises:
            ObjectNotListError: If a page is not a list
            CatalogApiError: If a page is a Scryfall error object
        """
        objects: list[ApiObject] = []
        page_url = url

        while True:
            logger.info("Sending API request for next page of results")
            page = await self._request("GET", page_url)

            match page:
                case CardList(data=data, has_more=has_more, next_page=next_page):
                    objects.extend(data)
                case _:
                    raise ObjectNotListError(page)

            if not has_more:
                return objects

            if next_page is None:
                logger.warning("Current page claims to have more data but fetch URL is absent")
                return objects

            page_url = next_page


async def get_catalog_client() -> AsyncIterator[CatalogClient]:
    """FastAPI dependency yielding a client for the duration of a request."""
    async with ScryfallClient() as client:
        yield client
