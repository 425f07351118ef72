"""
Tests for the node collection: tree shape, key ordering and links.

Run with: pytest tests/test_tree.py -v
"""

from itertools import combinations

import pytest
import numpy as np

from dudo_cfr.games.dudo import CHALLENGE, NUM_ACTIONS, NUM_SIDES, all_die_pairs
from dudo_cfr.games.infosets import decode_key, encode_key, root_identifier
from dudo_cfr.tree.builder import NodeCollection, build_node_collection, print_tree_stats


def reachable_information_sets():
    """Brute-force (player, roll, truncated history) triples of every bid sequence."""
    triples = set()
    bids = range(CHALLENGE)
    for length in range(len(bids) + 1):
        for sequence in combinations(bids, length):
            player = length % 2
            for roll in range(1, NUM_SIDES + 1):
                triples.add((player, roll, sequence[-3:]))
    return triples


@pytest.fixture(scope="module")
def collection():
    return build_node_collection()


class TestTreeShape:
    """Test the set of information sets created."""

    def test_keys_match_reachable_information_sets(self, collection):
        decoded = {decode_key(key) for key in collection.keys()}
        assert decoded == reachable_information_sets()

    def test_num_information_sets(self, collection):
        assert len(collection) == 2784

    def test_independent_of_die_pair_order(self, collection):
        reordered = build_node_collection(list(reversed(all_die_pairs())))
        assert reordered.keys() == collection.keys()
        assert reordered.num_edges == collection.num_edges

    def test_single_die_pair(self):
        single = build_node_collection([(2, 5)])
        assert len(single) == 464
        # One edge per non-empty bid sequence.
        assert single.num_edges == 2 ** CHALLENGE - 1

    def test_node_matches_key(self, collection):
        for holder in collection:
            player, roll, history = decode_key(holder.key)
            node = holder.node
            assert (node.player, node.player_roll, node.history) == (player, roll, history)
            expected_first = history[-1] + 1 if history else 0
            assert holder.first_available_action == expected_first

    def test_vector_lengths(self, collection):
        for holder in collection:
            node = holder.node
            expected = NUM_ACTIONS - node.first_available_action - (1 if node.is_starting_node else 0)
            assert len(node.regret_sum) == len(node.strategy) == expected
            assert len(node.strategy_sum) == len(node.utility) == expected


class TestStructuralLinks:
    """Test predecessor/successor links."""

    def test_key_ordering_invariant(self, collection):
        holders = collection.holders
        for predecessor, successor in collection.edges():
            assert holders[predecessor].key < holders[successor].key

    def test_links_advance_first_available_action(self, collection):
        holders = collection.holders
        for predecessor, successor in collection.edges():
            assert holders[successor].first_available_action > holders[predecessor].first_available_action
            assert holders[successor].node.player != holders[predecessor].node.player

    def test_predecessors_mirror_successors(self, collection):
        num_predecessor_links = sum(len(h.predecessors) for h in collection.holders)
        assert num_predecessor_links == collection.num_edges

    def test_terminal_and_starting_nodes(self, collection):
        for holder in collection:
            if holder.is_terminal:
                assert holder.successors == []
            if holder.node.is_starting_node:
                assert holder.predecessors == []

    def test_links_are_not_deduplicated(self, collection):
        # Player 0's opening node for a roll is built once per opponent die.
        root = collection.holder(encode_key((), 0, 1))
        assert len(root.successors) == NUM_SIDES * CHALLENGE
        assert len(set(root.successors)) == NUM_SIDES * CHALLENGE

    def test_rebuilding_appends_links_only(self):
        single = build_node_collection([(3, 3)])
        size = len(single)
        root = single.holder(encode_key((), 0, 3))
        root.node.regret_sum[:] = 1.0
        successors = list(root.successors)

        single.build([False] * NUM_ACTIONS, (3, 3), 0)

        assert len(single) == size
        assert root.successors == successors + successors
        assert np.all(root.node.regret_sum == 1.0)


class TestOrderedSlots:
    """Test identifier-filtered ordered traversal."""

    def test_ascending_filters_and_sorts(self, collection):
        identifiers = [root_identifier(0, 2), root_identifier(1, 5)]
        slots = collection.ascending_slots(identifiers)
        keys = [collection.holders[s].key for s in slots]

        assert keys == sorted(keys)
        assert all((k & 0xF) in identifiers for k in keys)
        expected = [k for k in collection.keys() if (k & 0xF) in identifiers]
        assert keys == expected

    def test_descending_is_reverse(self, collection):
        identifiers = [root_identifier(0, 6), root_identifier(1, 6)]
        assert collection.descending_slots(identifiers) == collection.ascending_slots(identifiers)[::-1]

    def test_one_sixth_per_player(self, collection):
        slots = collection.ascending_slots([root_identifier(0, 4)])
        num_player_0 = sum(1 for h in collection.holders if h.node.player == 0)
        assert len(slots) * NUM_SIDES == num_player_0

    def test_empty_collection(self):
        assert NodeCollection().ascending_slots([1, 9]) == []


def test_print_tree_stats(collection, capsys):
    print_tree_stats(collection)
    out = capsys.readouterr().out
    assert "Information sets: 2784" in out
    assert f"Structural edges: {collection.num_edges}" in out
