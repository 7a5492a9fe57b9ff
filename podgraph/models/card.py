"""Card — the resolved entity every other component passes around."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Card(BaseModel):
    """A card resolved to its canonical name, converted mana cost and types."""

    model_config = ConfigDict(frozen=True)

    name: str                               # Canonical name from the lookup service
    cmc: int = Field(ge=0, le=255)          # Exact converted mana cost
    types: List[str] = []                   # Type line split on spaces

    def is_creature(self) -> bool:
        return "Creature" in self.types
