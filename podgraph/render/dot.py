"""
DOT renderer — serializes a PodGraph for Graphviz.

Nodes are clustered by cost. Isolated nodes and, when a highlight target
is given, every node that can reach it are filled. While highlighting,
only edges between two highlighted nodes are drawn. Each distinct edge
label gets its own color, numbered in first-seen order.
"""

import logging
from pathlib import Path
from typing import Dict, Hashable, Iterator, List, Optional, Set, Union

from podgraph.graph.pod_graph import PodGraph

logger = logging.getLogger(__name__)

HEADER = "digraph {\n    node [colorscheme=spectral11]\nedge [colorscheme=dark28]\n"
ISOLATED_STYLE = "style=filled fillcolor=2"
HIGHLIGHT_STYLE = "style=filled fillcolor=11"


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _edge_label(edge: Hashable) -> str:
    return "" if edge is None else str(edge)


def _node_styles(isolated: bool, highlighted: bool) -> List[str]:
    # Graphviz keeps the last fillcolor, so highlight wins over isolation.
    styles = []
    if isolated:
        styles.append(ISOLATED_STYLE)
    if highlighted:
        styles.append(HIGHLIGHT_STYLE)
    return styles


def iter_dot(graph: PodGraph, highlight_target: Optional[str] = None) -> Iterator[str]:
    """Yield the DOT document in chunks, one statement per chunk."""
    highlight: Optional[Set[int]] = None
    if highlight_target is not None:
        highlight = graph.reachable_to(highlight_target)
        logger.info("%d cards can reach %r", len(highlight), highlight_target)

    yield HEADER
    groups = graph.nodes_by_cmc()
    for cmc in sorted(groups):
        yield f"    subgraph cluster_{cmc} {{\n"
        for node in groups[cmc]:
            attrs = [f'label = "{_quote(graph.card(node).name)}"']
            attrs.extend(_node_styles(
                graph.is_isolated(node),
                highlight is not None and node in highlight,
            ))
            yield f"        {node} [ {' '.join(attrs)} ]\n"
        yield f'       label = "{cmc}"\n'
        yield "   }\n"

    colors: Dict[Hashable, int] = {}
    for source, target, edge in graph.edges():
        if highlight is not None and not (source in highlight and target in highlight):
            continue
        color = colors.setdefault(edge, len(colors) + 1)
        yield (
            f'{source} -> {target} [ label = "{_quote(_edge_label(edge))}" '
            f"color={color} fontcolor={color}]\n"
        )
    yield "}"


def render_dot(graph: PodGraph, highlight_target: Optional[str] = None) -> str:
    """Render the whole DOT document as a string."""
    return "".join(iter_dot(graph, highlight_target))


def write_dot(
    graph: PodGraph,
    path: Union[str, Path],
    highlight_target: Optional[str] = None,
) -> None:
    """Write the DOT document to ``path`` incrementally."""
    with Path(path).open("w", encoding="utf-8") as handle:
        for chunk in iter_dot(graph, highlight_target):
            handle.write(chunk)
    logger.info("Wrote %d cards to %s", len(graph), path)
