"""Tests for pod policies and the Pod Graph."""

import pytest

from podgraph.graph.pod_graph import PodGraph
from podgraph.graph.policy import (
    POLICIES,
    BirthingPod,
    Link,
    LinkDirection,
    PyreOfHeroes,
    UnknownPolicyError,
    get_policy,
)
from podgraph.models.card import Card


def _card(name: str, cmc: int, *types: str) -> Card:
    return Card(name=name, cmc=cmc, types=list(types))


class TestBirthingPod:
    def test_one_more_links_from_existing(self):
        link = BirthingPod().check(_card("New", 3), _card("Old", 2))
        assert link == Link(edge=None, direction=LinkDirection.FROM_EXISTING)

    def test_one_less_links_to_existing(self):
        link = BirthingPod().check(_card("New", 1), _card("Old", 2))
        assert link == Link(edge=None, direction=LinkDirection.TO_EXISTING)

    @pytest.mark.parametrize("new_cmc,old_cmc", [(2, 2), (4, 2), (0, 2), (7, 1)])
    def test_no_link_otherwise(self, new_cmc, old_cmc):
        assert BirthingPod().check(_card("New", new_cmc), _card("Old", old_cmc)) is None


class TestPyreOfHeroes:
    def test_requires_shared_type(self):
        policy = PyreOfHeroes()
        assert policy.check(_card("Elf", 2, "Elf"), _card("Goblin", 1, "Goblin")) is None

    def test_label_is_first_shared_type(self):
        policy = PyreOfHeroes()
        link = policy.check(
            _card("New", 3, "Human", "Elf", "Warrior"),
            _card("Old", 2, "Warrior", "Elf"),
        )
        assert link == Link(edge="Elf", direction=LinkDirection.FROM_EXISTING)

    def test_shared_type_without_adjacent_cost(self):
        policy = PyreOfHeroes()
        assert policy.check(_card("New", 4, "Goblin"), _card("Old", 2, "Goblin")) is None


class TestPolicyRegistry:
    def test_registered_policies(self):
        assert set(POLICIES) == {"birthing-pod", "pyre-of-heroes"}
        assert isinstance(get_policy("pyre-of-heroes"), PyreOfHeroes)

    def test_unknown_policy(self):
        with pytest.raises(UnknownPolicyError, match="birthing-pod"):
            get_policy("natural-order")

    def test_custom_policy_needs_no_graph_changes(self):
        class SameCost:
            name = "same-cost"

            def check(self, new, existing):
                if new.cmc == existing.cmc:
                    return Link(edge=new.cmc, direction=LinkDirection.TO_EXISTING)
                return None

        graph = PodGraph(SameCost())
        a = graph.add_card(_card("A", 2))
        b = graph.add_card(_card("B", 2))
        assert graph.edges() == [(b, a, 2)]


class TestPodGraph:
    def test_empty(self):
        graph = PodGraph(BirthingPod())
        assert len(graph) == 0
        assert graph.edges() == []
        assert graph.reachable_to("anything") == set()

    def test_insert_links_against_existing_nodes(self):
        graph = PodGraph(BirthingPod())
        two = graph.add_card(_card("Two", 2))
        three = graph.add_card(_card("Three", 3))
        assert (two, three) == (0, 1)
        assert graph.edges() == [(two, three, None)]

    def test_insert_cheaper_after_expensive(self):
        graph = PodGraph(BirthingPod())
        three = graph.add_card(_card("Three", 3))
        two = graph.add_card(_card("Two", 2))
        assert graph.edges() == [(two, three, None)]

    def test_pair_outcome_independent_of_other_nodes(self):
        graph = PodGraph(BirthingPod())
        for i, cmc in enumerate([5, 9, 1, 2]):
            graph.add_card(_card(f"Filler {i}", cmc))
        old = graph.add_card(_card("Old", 6))
        new = graph.add_card(_card("New", 7))
        assert (old, new, None) in graph.edges()

    def test_chain_and_reachability(self):
        graph = PodGraph(BirthingPod())
        one = graph.add_card(_card("Llanowar Elves", 1))
        two = graph.add_card(_card("Wall of Roots", 2))
        three = graph.add_card(_card("Eternal Witness", 3))
        four = graph.add_card(_card("Thragtusk", 5))

        assert graph.reachable_to("Witness") == {one, two, three}
        assert graph.reachable_to("Elves") == {one}
        assert graph.reachable_to("Thragtusk") == {four}
        assert graph.reachable_to("Tarmogoyf") == set()

    def test_reachability_uses_first_match(self):
        graph = PodGraph(BirthingPod())
        first = graph.add_card(_card("Goblin Matron", 3))
        graph.add_card(_card("Goblin Chieftain", 2))
        graph.add_card(_card("Goblin Ringleader", 4))
        assert graph.find("Goblin") == first

    def test_isolation(self):
        graph = PodGraph(BirthingPod())
        two = graph.add_card(_card("Two", 2))
        five = graph.add_card(_card("Five", 5))
        three = graph.add_card(_card("Three", 3))
        assert not graph.is_isolated(two)
        assert not graph.is_isolated(three)
        assert graph.is_isolated(five)

    def test_nodes_by_cmc(self):
        graph = PodGraph(BirthingPod())
        a = graph.add_card(_card("A", 2))
        b = graph.add_card(_card("B", 1))
        c = graph.add_card(_card("C", 2))
        assert graph.nodes_by_cmc() == {2: [a, c], 1: [b]}
        assert graph.card(b).name == "B"
        assert graph.nodes() == [a, b, c]

    def test_pyre_edges_are_labeled(self):
        graph = PodGraph(PyreOfHeroes())
        matron = graph.add_card(_card("Goblin Matron", 2, "Goblin"))
        graph.add_card(_card("Llanowar Elves", 1, "Elf", "Druid"))
        chieftain = graph.add_card(_card("Goblin Chieftain", 3, "Goblin"))
        assert graph.edges() == [(matron, chieftain, "Goblin")]
