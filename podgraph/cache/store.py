"""
Card Cache — name → Card mapping persisted as a single JSON document.

Read by: CardResolver before every remote lookup
Written by: CardResolver after every successful remote lookup

Behavioral Contract:
- Loaded lazily, exactly once per instance. The first caller pays the load
  cost; concurrent early callers all observe the same loaded map.
- A missing file means an empty cache. Any other load failure propagates to
  the caller that triggered the load; the next caller retries.
- Every put serializes the whole map to a sibling temporary file and renames
  it over the canonical path, so the file on disk is always a complete
  snapshot.
- Reads and writes are serialized by one lock. Two puts for different names
  each write a full snapshot; the last writer's snapshot wins and already
  contains the earlier entry.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import TypeAdapter

from podgraph.models.card import Card

logger = logging.getLogger(__name__)

_CACHE_ADAPTER = TypeAdapter(Dict[str, Card])


class CardCache:
    """
    Process-scoped card cache. Create one per run and hand it to the
    resolver; tests create their own instance on a temporary path.
    """

    def __init__(self, path: Union[str, Path] = "cache.json"):
        self.path = Path(path)
        self.tmp_path = self.path.with_name(self.path.name + ".tmp")
        self._cards: Optional[Dict[str, Card]] = None
        self._init_lock = asyncio.Lock()
        self._lock = asyncio.Lock()

    async def _ensure_loaded(self) -> Dict[str, Card]:
        """Load the cache file on first use."""
        if self._cards is not None:
            return self._cards
        async with self._init_lock:
            if self._cards is None:
                self._cards = await asyncio.to_thread(self._read_file)
                logger.debug("Loaded %d cached cards from %s", len(self._cards), self.path)
        return self._cards

    def _read_file(self) -> Dict[str, Card]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        return _CACHE_ADAPTER.validate_json(raw)

    async def get(self, name: str) -> Optional[Card]:
        """Look up a card by the name it was requested under."""
        cards = await self._ensure_loaded()
        async with self._lock:
            return cards.get(name)

    async def put(self, name: str, card: Card) -> None:
        """Insert a card and atomically persist the full map."""
        cards = await self._ensure_loaded()
        async with self._lock:
            cards[name] = card
            payload = _CACHE_ADAPTER.dump_json(cards)
            await asyncio.to_thread(self._write_snapshot, payload)

    def _write_snapshot(self, payload: bytes) -> None:
        """Write to the temporary path, then rename over the canonical path."""
        try:
            with self.tmp_path.open("wb") as handle:
                handle.write(payload)
                handle.flush()
            self.tmp_path.replace(self.path)
        except BaseException:
            self.tmp_path.unlink(missing_ok=True)
            raise
