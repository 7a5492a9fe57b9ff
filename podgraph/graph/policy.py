"""
Pod policies — decide whether two cards are linked, which way, and how the
link is labeled.

A policy is anything with a ``check(new, existing)`` method returning an
optional Link. PodGraph never inspects the policy beyond that call, so a
new policy only needs to be added to POLICIES to become selectable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Hashable, Optional, Protocol, TypeVar

from podgraph.models.card import Card

EdgeT = TypeVar("EdgeT", bound=Hashable)


class LinkDirection(str, Enum):
    FROM_EXISTING = "from_existing"   # existing → new
    TO_EXISTING = "to_existing"       # new → existing


@dataclass(frozen=True)
class Link(Generic[EdgeT]):
    """An edge to add between a newly inserted card and an existing one."""

    edge: EdgeT
    direction: LinkDirection


class PodPolicy(Protocol[EdgeT]):
    """Protocol for the compatibility rule parameterizing a PodGraph."""

    name: str

    def check(self, new: Card, existing: Card) -> Optional[Link[EdgeT]]: ...


class UnknownPolicyError(KeyError):
    """Raised when a policy name is not registered."""
    pass


class BirthingPod:
    """
    Cards are linked when their costs differ by exactly one; the link runs
    from the cheaper card to the more expensive one. Edges carry no label.
    """

    name = "birthing-pod"

    def check(self, new: Card, existing: Card) -> Optional[Link[None]]:
        diff = new.cmc - existing.cmc
        if diff == 1:
            return Link(edge=None, direction=LinkDirection.FROM_EXISTING)
        if diff == -1:
            return Link(edge=None, direction=LinkDirection.TO_EXISTING)
        return None


class PyreOfHeroes:
    """
    Birthing Pod adjacency, but only between cards sharing a creature type.
    The edge is labeled with the first of the new card's types that the
    existing card also has.
    """

    name = "pyre-of-heroes"

    def __init__(self):
        self._adjacency = BirthingPod()

    def check(self, new: Card, existing: Card) -> Optional[Link[str]]:
        shared = next((t for t in new.types if t in existing.types), None)
        if shared is None:
            return None
        link = self._adjacency.check(new, existing)
        if link is None:
            return None
        return Link(edge=shared, direction=link.direction)


POLICIES: Dict[str, PodPolicy] = {
    BirthingPod.name: BirthingPod(),
    PyreOfHeroes.name: PyreOfHeroes(),
}


def get_policy(name: str) -> PodPolicy:
    """Look up a registered policy by name."""
    try:
        return POLICIES[name]
    except KeyError:
        raise UnknownPolicyError(
            f"unknown policy {name!r}; choose one of: {', '.join(sorted(POLICIES))}"
        ) from None
