"""
Podgraph CLI — decklist in, Graphviz DOT out.

    podgraph deck.txt -t "Goblin Matron" --policy pyre-of-heroes
    cat deck.txt | podgraph

Reads the decklist from FILE (or standard input when FILE is omitted or
"-"), resolves every card, builds the pod graph and writes it to the
output path.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import typer

from podgraph.cache.store import CardCache
from podgraph.graph.pod_graph import PodGraph
from podgraph.graph.policy import UnknownPolicyError, get_policy
from podgraph.ingest.pipeline import ingest, read_lines
from podgraph.models.config import PodgraphConfig
from podgraph.render.dot import write_dot
from podgraph.resolver.names import CardDataError
from podgraph.resolver.resolver import CardResolver
from podgraph.scryfall.client import CardLookupError, ScryfallClient

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Build a Birthing Pod style graph from a decklist.")


async def build_graph(lines: Iterable[str], config: PodgraphConfig) -> PodGraph:
    """Resolve every decklist line and fold the creatures into a PodGraph."""
    graph = PodGraph(get_policy(config.policy))
    cache = CardCache(config.cache_path)
    async with ScryfallClient(
        base_url=config.lookup_base_url,
        timeout_seconds=config.lookup_timeout_seconds,
    ) as client:
        resolver = CardResolver(cache, client)
        async for card in ingest(lines, resolver, config.max_concurrency):
            logger.info("added %s", card.name)
            graph.add_card(card)
    return graph


def run(
    lines: Iterable[str],
    config: PodgraphConfig,
    highlight: Optional[str] = None,
) -> PodGraph:
    """Build the graph and write it to ``config.output_path``."""
    graph = asyncio.run(build_graph(lines, config))
    write_dot(graph, config.output_path, highlight)
    return graph


@app.command()
def main(
    file: Optional[Path] = typer.Argument(
        None, help="Decklist file, one card per line. Omit or use '-' for stdin."
    ),
    highlight: Optional[str] = typer.Option(
        None, "--highlight", "-t", help="Highlight every card that can reach this card."
    ),
    policy: str = typer.Option("birthing-pod", "--policy", help="Linking policy."),
    cache: Path = typer.Option(Path("cache.json"), "--cache", help="Card cache file."),
    output: Path = typer.Option(Path("graph.dot"), "--output", "-o", help="DOT output file."),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", min=1, help="Concurrent lookups (default: CPU count)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        get_policy(policy)
    except UnknownPolicyError as e:
        typer.echo(f"error: {e.args[0]}", err=True)
        raise typer.Exit(code=2)

    settings = dict(cache_path=str(cache), output_path=str(output), policy=policy)
    if concurrency is not None:
        settings["max_concurrency"] = concurrency
    config = PodgraphConfig(**settings)

    try:
        if file is None or str(file) == "-":
            run(read_lines(sys.stdin), config, highlight)
        else:
            with file.open("r", encoding="utf-8") as stream:
                run(read_lines(stream), config, highlight)
    except (CardLookupError, CardDataError, OSError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
