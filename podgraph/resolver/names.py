"""Decklist line normalization and mana cost coercion."""

import math
import re
from typing import Optional

_QUANTITY_PREFIX = re.compile(r"^[0-9]+")


class CardDataError(ValueError):
    """Raised when a looked-up card carries a cost that cannot be a Card.cmc."""
    pass


def normalize_name(line: str) -> str:
    """
    Strip surrounding whitespace and a leading quantity from a decklist line.

    Only a pure run of ASCII digits is consumed: "2 Birds of Paradise"
    becomes "Birds of Paradise", "10x Something" becomes "x Something".
    """
    name = line.strip()
    quantity = _QUANTITY_PREFIX.match(name)
    if quantity:
        name = name[quantity.end():].strip()
    return name


def cmc_to_int(cmc: Optional[float], card_name: str = "<unknown>") -> int:
    """
    Coerce a remote converted mana cost to an exact integer.

    Whole values (1.0, 3.0) are returned as ints. Anything strictly between
    two consecutive integers is rejected, as are missing, negative, non-finite
    and out-of-range values.
    """
    if cmc is None:
        raise CardDataError(f"{card_name} doesn't have a cmc")
    if not math.isfinite(cmc) or cmc < 0:
        raise CardDataError(f"{card_name} has an invalid cmc: {cmc!r}")
    lower = math.floor(cmc)
    if lower < cmc < lower + 1:
        raise CardDataError(f"{card_name} has a fractional cmc: {cmc!r}")
    if lower > 255:
        raise CardDataError(f"{card_name} has an out of range cmc: {cmc!r}")
    return int(lower)
