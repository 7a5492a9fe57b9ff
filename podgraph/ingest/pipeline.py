"""
Ingestion Pipeline — decklist lines in, creature Cards out.

Behavioral Contract:
- Each line is normalized and resolved; at most ``max_concurrency``
  resolutions are in flight at any time
- Cards are yielded in completion order, not input order
- Only creatures are yielded, with everything up to and including the
  type line's em-dash removed from ``types``
- The first failed resolution is raised to the consumer; remaining
  in-flight resolutions are cancelled and their results discarded
"""

import asyncio
import logging
import os
from typing import AsyncIterator, Iterable, Iterator, Optional, Set, TextIO

from podgraph.models.card import Card
from podgraph.resolver.names import normalize_name
from podgraph.resolver.resolver import CardResolver

logger = logging.getLogger(__name__)

TYPE_SEPARATOR = "—"


def read_lines(stream: TextIO) -> Iterator[str]:
    """Yield lines from a text stream without their line terminators."""
    for line in stream:
        yield line.rstrip("\r\n")


def creature_subtypes(card: Card) -> Optional[Card]:
    """
    Keep creatures only, trimming the supertypes/types before the em-dash.

    "Legendary Creature — Elf Druid" becomes ["Elf", "Druid"].
    """
    if not card.is_creature():
        return None
    if TYPE_SEPARATOR in card.types:
        dash = card.types.index(TYPE_SEPARATOR)
        return card.model_copy(update={"types": card.types[dash + 1:]})
    return card


async def _resolve_line(resolver: CardResolver, line: str) -> Optional[Card]:
    card = await resolver.resolve(normalize_name(line))
    return creature_subtypes(card)


async def ingest(
    lines: Iterable[str],
    resolver: CardResolver,
    max_concurrency: Optional[int] = None,
) -> AsyncIterator[Card]:
    """
    Resolve every line concurrently and yield the creatures as they complete.

    ``lines`` is consumed once, one line at a time in a worker thread, so a
    slow source (stdin) never stalls lookups already in flight.
    ``max_concurrency`` defaults to the host's CPU count.
    """
    limit = (os.cpu_count() or 1) if max_concurrency is None else max_concurrency
    if limit < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {limit}")

    pending_lines = iter(lines)
    in_flight: Set[asyncio.Task] = set()
    reader: Optional[asyncio.Task] = None
    exhausted = False

    try:
        while True:
            if reader is None and not exhausted and len(in_flight) < limit:
                reader = asyncio.ensure_future(asyncio.to_thread(next, pending_lines, None))
            waiting = (in_flight | {reader}) if reader is not None else set(in_flight)
            if not waiting:
                return

            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
            finished = done - {reader}
            in_flight.difference_update(finished)

            if reader in done:
                line = reader.result()
                reader = None
                if line is None:
                    exhausted = True
                else:
                    in_flight.add(asyncio.ensure_future(_resolve_line(resolver, line)))

            failed = [task for task in finished if task.exception() is not None]
            if failed:
                logger.debug("Resolution failed, dropping %d in-flight lookups", len(in_flight))
                raise failed[0].exception()
            for task in finished:
                card = task.result()
                if card is not None:
                    yield card
    finally:
        leftovers = set(in_flight)
        if reader is not None:
            leftovers.add(reader)
        for task in leftovers:
            task.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)
