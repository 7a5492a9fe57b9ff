"""Podgraph data models."""

from podgraph.models.card import Card
from podgraph.models.config import PodgraphConfig
from podgraph.models.scryfall import ScryfallCard

__all__ = [
    "Card",
    "PodgraphConfig",
    "ScryfallCard",
]
