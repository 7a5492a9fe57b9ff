"""
Scryfall lookup client — fuzzy card name resolution over HTTP.

The only remote dependency of the pipeline. Anything it returns is treated
as untrusted; validation of the numeric fields happens in the resolver.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from podgraph.models.scryfall import ScryfallCard

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.scryfall.com"
USER_AGENT = "podgraph/0.1"


class CardLookupError(Exception):
    """Raised when a card name cannot be resolved remotely."""

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name


class CardNotFoundError(CardLookupError):
    """The service has no card matching the name (or the match is ambiguous)."""
    pass


class LookupServiceError(CardLookupError):
    """Transport failure, timeout or unexpected response from the service."""
    pass


class ScryfallClient:
    """
    Async client for the /cards/named endpoint.

    Use as an async context manager. Pass ``http_client`` to share a
    connection pool or to inject a mock transport; an injected client is
    not closed by this wrapper.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def named_fuzzy(self, name: str) -> ScryfallCard:
        """Resolve a possibly misspelled card name to a single card."""
        url = f"{self.base_url}/cards/named"
        try:
            response = await self._client.get(url, params={"fuzzy": name})
        except httpx.HTTPError as e:
            raise LookupServiceError(name, f"lookup of {name!r} failed: {e}") from e

        if response.status_code == 404:
            raise CardNotFoundError(name, f"no card found for {name!r}: {_details(response)}")
        if response.is_error:
            raise LookupServiceError(
                name,
                f"lookup of {name!r} returned HTTP {response.status_code}: {_details(response)}",
            )

        try:
            card = ScryfallCard.model_validate_json(response.content)
        except ValidationError as e:
            raise LookupServiceError(name, f"malformed response for {name!r}: {e}") from e
        logger.debug("Resolved %r remotely as %r", name, card.name)
        return card


def _details(response: httpx.Response) -> str:
    """Extract Scryfall's error description, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "details" in body:
        return str(body["details"])
    return response.text
