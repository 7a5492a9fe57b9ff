"""Scryfall card record — the subset of the remote response the resolver reads."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ScryfallCard(BaseModel):
    """A card as returned by the fuzzy name lookup. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str
    type_line: Optional[str] = None
    cmc: Optional[float] = None
