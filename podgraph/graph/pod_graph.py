"""
Pod Graph — directed multigraph of cards linked by a pod policy.

Behavioral Contract:
- Nodes are stable integer indices assigned in insertion order
- Inserting a card compares it against every card already present and
  adds one edge per link the policy returns; earlier edges are never
  recomputed
- Edges iterate in insertion order
- The graph is built by a single consumer; it is not safe to insert from
  concurrent tasks
"""

import logging
from typing import Dict, Generic, List, Optional, Set, Tuple

import networkx as nx

from podgraph.graph.policy import EdgeT, LinkDirection, PodPolicy
from podgraph.models.card import Card

logger = logging.getLogger(__name__)


class PodGraph(Generic[EdgeT]):
    """Cards as nodes, policy links as edges."""

    def __init__(self, policy: PodPolicy[EdgeT]):
        self.policy = policy
        self._g = nx.MultiDiGraph()
        self._edge_seq = 0

    def __len__(self) -> int:
        return self._g.number_of_nodes()

    def add_card(self, card: Card) -> int:
        """Insert a card, linking it to every compatible existing card."""
        links = []
        for node, existing in self._g.nodes(data="card"):
            link = self.policy.check(card, existing)
            if link is not None:
                links.append((node, link))

        node = self._g.number_of_nodes()
        self._g.add_node(node, card=card)
        for existing_node, link in links:
            if link.direction == LinkDirection.FROM_EXISTING:
                self._add_edge(existing_node, node, link.edge)
            else:
                self._add_edge(node, existing_node, link.edge)
        logger.debug("Inserted %s as node %d with %d links", card.name, node, len(links))
        return node

    def _add_edge(self, source: int, target: int, edge: EdgeT) -> None:
        self._g.add_edge(source, target, label=edge, seq=self._edge_seq)
        self._edge_seq += 1

    def nodes(self) -> List[int]:
        return list(self._g.nodes)

    def card(self, node: int) -> Card:
        return self._g.nodes[node]["card"]

    def edges(self) -> List[Tuple[int, int, EdgeT]]:
        """All edges as (source, target, label), in insertion order."""
        edges = sorted(self._g.edges(data=True), key=lambda e: e[2]["seq"])
        return [(source, target, data["label"]) for source, target, data in edges]

    def find(self, name_substring: str) -> Optional[int]:
        """First node, in insertion order, whose card name contains the substring."""
        return next(
            (node for node, card in self._g.nodes(data="card") if name_substring in card.name),
            None,
        )

    def reachable_to(self, name_substring: str) -> Set[int]:
        """
        Nodes with a directed path to the first card matching the substring,
        the target itself included. Empty if nothing matches.
        """
        target = self.find(name_substring)
        if target is None:
            return set()
        return nx.ancestors(self._g, target) | {target}

    def is_isolated(self, node: int) -> bool:
        return self._g.degree(node) == 0

    def nodes_by_cmc(self) -> Dict[int, List[int]]:
        """Group node indices by cost, nodes in insertion order within a group."""
        groups: Dict[int, List[int]] = {}
        for node, card in self._g.nodes(data="card"):
            groups.setdefault(card.cmc, []).append(node)
        return groups
