"""
Card Resolver — turns a normalized name into a Card.

Behavioral Contract:
- A cache hit returns immediately and never touches the lookup service
- A cache miss (or a cache that fails to read) falls through to the lookup
- Lookup failures propagate; cache failures are logged and swallowed
- A card whose cmc is missing or fractional is a data error and aborts
"""

import logging
from typing import Optional, Protocol

from podgraph.cache.store import CardCache
from podgraph.models.card import Card
from podgraph.models.scryfall import ScryfallCard
from podgraph.resolver.names import cmc_to_int

logger = logging.getLogger(__name__)


class CardLookup(Protocol):
    """Protocol for the remote lookup — pluggable backend."""

    async def named_fuzzy(self, name: str) -> ScryfallCard: ...


def card_from_scryfall(record: ScryfallCard) -> Card:
    """Convert a remote record into the internal Card shape."""
    types = record.type_line.split(" ") if record.type_line else []
    return Card(
        name=record.name,
        cmc=cmc_to_int(record.cmc, record.name),
        types=types,
    )


class CardResolver:
    """Cache-first card resolution."""

    def __init__(self, cache: CardCache, lookup: CardLookup):
        self.cache = cache
        self.lookup = lookup

    async def resolve(self, name: str) -> Card:
        """Resolve a card by name, consulting and then updating the cache."""
        cached = await self._find_in_cache(name)
        if cached is not None:
            return cached

        record = await self.lookup.named_fuzzy(name)
        card = card_from_scryfall(record)

        try:
            await self.cache.put(name, card)
        except (OSError, ValueError) as e:
            logger.warning("Failed to store %r in cache: %r", name, e)
        return card

    async def _find_in_cache(self, name: str) -> Optional[Card]:
        try:
            card = await self.cache.get(name)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read %r from cache: %r", name, e)
            return None
        if card is None:
            logger.info("Cache miss: %s", name)
        return card
