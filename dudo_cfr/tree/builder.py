"""
Node collection builder.

Enumerates every (die pair, bid sequence) path of the game once and maps
each visited state to the node holder of its abstracted information set.
Holders live in a single arena (a list); structural links are arena slots.

Because recall is truncated, many concrete paths alias to the same holder.
Links are deliberately not deduplicated: every concrete path appends its own
predecessor/successor edge, and that multiplicity is part of how reach
probability accumulates during training.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from dudo_cfr.games.base import Player
from dudo_cfr.games.dudo import CHALLENGE, NUM_ACTIONS, NUM_PLAYERS, all_die_pairs
from dudo_cfr.games.infosets import (
    encode_key,
    first_available_action,
    key_identifier,
    truncated_history,
)
from dudo_cfr.engine.node import DecisionNode


@dataclass
class NodeHolder:
    """A decision node plus its structural links (arena slots)."""
    key: int
    node: DecisionNode
    predecessors: List[int] = field(default_factory=list)
    successors: List[int] = field(default_factory=list)

    @property
    def first_available_action(self) -> int:
        return self.node.first_available_action

    @property
    def is_terminal(self) -> bool:
        return self.first_available_action == CHALLENGE

    def propagate_reach(self, arena: Sequence['NodeHolder']) -> np.ndarray:
        """
        Compute this node's strategy and push reach to every successor.

        Returns:
            The strategy used for this iteration
        """
        strategy = self.node.compute_strategy()
        reach = self.node.reach_probability_sum.tolist()
        probabilities = strategy.tolist()
        first_available = self.first_available_action
        for slot in self.successors:
            arena[slot].node.receive_reach(reach, probabilities, first_available)
        return strategy

    def backpropagate_utility(
        self,
        arena: Sequence['NodeHolder'],
        dice: Sequence[int]
    ) -> float:
        """
        Compute this node's utility and regrets, then hand the (negated)
        utility to every predecessor.

        Returns:
            Expected utility of this node for its acting player
        """
        total_utility = self.node.compute_utility(dice)
        first_available = self.first_available_action
        for slot in self.predecessors:
            arena[slot].node.receive_utility(total_utility, first_available)
        return total_utility


class NodeCollection:
    """
    Ordered store of node holders keyed by information-set key.

    Iterating in ascending key order visits predecessors before successors;
    descending order visits successors first.
    """

    def __init__(self):
        self.holders: List[NodeHolder] = []
        self._slots: Dict[int, int] = {}
        self._ordered_keys: Optional[List[int]] = None
        self._by_identifier: Optional[Dict[int, List[Tuple[int, int]]]] = None

    def __len__(self) -> int:
        return len(self.holders)

    def __contains__(self, key: int) -> bool:
        return key in self._slots

    def __iter__(self) -> Iterator[NodeHolder]:
        """Holders in ascending key order."""
        for key in self.keys():
            yield self.holders[self._slots[key]]

    def keys(self) -> List[int]:
        """All keys, ascending."""
        if self._ordered_keys is None:
            self._ordered_keys = sorted(self._slots)
        return self._ordered_keys

    def slot(self, key: int) -> int:
        return self._slots[key]

    def holder(self, key: int) -> NodeHolder:
        return self.holders[self._slots[key]]

    def _get_or_create(self, claimed_flags: Sequence[bool], player: int, roll: int) -> int:
        history = truncated_history(claimed_flags)
        key = encode_key(history, player, roll)
        first_available = first_available_action(claimed_flags)

        slot = self._slots.get(key)
        if slot is not None:
            existing = self.holders[slot].first_available_action
            assert existing == first_available, \
                f"Key {key:#x} reused with first available action {first_available}, " \
                f"expected {existing}"
            return slot

        slot = len(self.holders)
        self.holders.append(NodeHolder(
            key=key,
            node=DecisionNode(first_available, roll, player, history)
        ))
        self._slots[key] = slot
        self._ordered_keys = None
        self._by_identifier = None
        return slot

    def build(
        self,
        claimed_flags: List[bool],
        dice: Sequence[int],
        player: int,
        predecessor: Optional[int] = None
    ) -> int:
        """
        Recursively add the subtree below the given bid state.

        Args:
            claimed_flags: claimed_flags[a] is True if bid a was made (mutated
                during the walk and restored before returning)
            dice: Both players' rolls for this build
            player: Player to act
            predecessor: Arena slot of the node that led here, if any

        Returns:
            Arena slot of the node for this state
        """
        slot = self._get_or_create(claimed_flags, player, dice[player])
        holder = self.holders[slot]

        if predecessor is not None:
            holder.predecessors.append(predecessor)

        if holder.is_terminal:
            return slot

        for action in range(holder.first_available_action, CHALLENGE):
            claimed_flags[action] = True
            successor = self.build(claimed_flags, dice, Player(player).opponent, slot)
            holder.successors.append(successor)
            claimed_flags[action] = False

        return slot

    def _identifier_index(self) -> Dict[int, List[Tuple[int, int]]]:
        if self._by_identifier is None:
            index: Dict[int, List[Tuple[int, int]]] = {}
            for key in self.keys():
                index.setdefault(key_identifier(key), []).append((key, self._slots[key]))
            self._by_identifier = index
        return self._by_identifier

    def ascending_slots(self, identifiers: Iterable[int]) -> List[int]:
        """Arena slots whose key identifier is in ``identifiers``, ascending by key."""
        index = self._identifier_index()
        selected: List[Tuple[int, int]] = []
        for identifier in set(identifiers):
            selected.extend(index.get(identifier, ()))
        selected.sort()
        return [slot for _, slot in selected]

    def descending_slots(self, identifiers: Iterable[int]) -> List[int]:
        """Arena slots whose key identifier is in ``identifiers``, descending by key."""
        return self.ascending_slots(identifiers)[::-1]

    def edges(self) -> Iterator[Tuple[int, int]]:
        """All (predecessor slot, successor slot) links, repeats included."""
        for slot, holder in enumerate(self.holders):
            for successor in holder.successors:
                yield slot, successor

    @property
    def num_edges(self) -> int:
        return sum(len(holder.successors) for holder in self.holders)


def build_node_collection(
    die_pairs: Optional[Iterable[Tuple[int, int]]] = None
) -> NodeCollection:
    """
    Build the node collection for every die pair.

    Each build starts from an empty bid history with player 0 to act.

    Args:
        die_pairs: (d0, d1) outcomes to enumerate (default: all 36)

    Returns:
        Populated NodeCollection
    """
    collection = NodeCollection()
    if die_pairs is None:
        die_pairs = all_die_pairs()

    for dice in die_pairs:
        claimed_flags = [False] * NUM_ACTIONS
        collection.build(claimed_flags, dice, Player.PLAYER_1)

    return collection


def print_tree_stats(collection: NodeCollection) -> None:
    """Print summary statistics for a node collection."""
    holders = collection.holders
    num_terminal = sum(1 for h in holders if h.is_terminal)
    num_starting = sum(1 for h in holders if h.node.is_starting_node)
    per_player = [sum(1 for h in holders if h.node.player == p) for p in range(NUM_PLAYERS)]
    num_local_actions = sum(h.node.num_actions for h in holders)

    print(f"Node Collection Statistics:")
    print(f"  Information sets: {len(collection)}")
    for p, count in enumerate(per_player):
        print(f"    Player {p}: {count}")
    print(f"  Starting nodes: {num_starting}")
    print(f"  Terminal nodes: {num_terminal}")
    print(f"  Infoset-actions: {num_local_actions}")
    print(f"  Structural edges: {collection.num_edges}")
