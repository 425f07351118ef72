"""
Chance-sampled CFR trainer for two-player Dudo with three-bid recall.

Each iteration rolls both dice, then makes two passes over the nodes that
belong to the rolled (player, die) pairs:

1. Ascending key order: every node computes its regret-matching strategy
   and pushes reach probability to its successors. Keys grow with depth,
   so a node's predecessors have all reported before it runs.
2. Descending key order: every node computes its expected utility, updates
   its regrets and hands the negated utility to its predecessors. Successors
   have all reported before a node runs.

Part-way through training (half-way by default) the average-strategy
accumulators are cleared so that early, unconverged strategies do not bias
the reported average.

Note on the regret update: regret for action a is accumulated as
opponent_reach * (strategy[a] * utility[a] - expected_utility), i.e. each
action's utility is weighted by its own probability before the expected
value is subtracted. This differs from the textbook counterfactual regret
(utility[a] - expected_utility) and is kept unchanged.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from dudo_cfr.games.base import Player
from dudo_cfr.games.dudo import action_name, roll_dice
from dudo_cfr.games.infosets import encode_key, root_identifier
from dudo_cfr.engine.ops import check_strategy_invariant, check_zero_sum_invariant
from dudo_cfr.tree.builder import NodeCollection, build_node_collection


REPORT_SEPARATOR = "-" * 49


@dataclass
class StrategyEntry:
    """Average strategy of one information set."""
    key: int
    player: int
    roll: int
    history: Tuple[int, ...]
    actions: Tuple[int, ...]
    probabilities: np.ndarray

    def action_names(self) -> List[str]:
        return [action_name(a) for a in self.actions]

    def as_dict(self) -> Dict[str, float]:
        """{action_name: probability}"""
        return {
            action_name(a): float(p)
            for a, p in zip(self.actions, self.probabilities)
        }


class Dudo3Trainer:
    """
    CFR trainer over the abstracted Dudo node collection.

    Example:
        trainer = Dudo3Trainer()
        trainer.train(20000)
        trainer.print_results()
    """

    def __init__(
        self,
        reset_fraction: Optional[float] = 0.5,
        rng: Optional[np.random.Generator] = None,
        check_invariants: bool = False,
        verbose: bool = False
    ):
        """
        Initialize the trainer and build the node collection.

        Args:
            reset_fraction: Fraction of a train() call after which the average
                strategy accumulators are cleared (None disables the reset)
            rng: Source of dice rolls (default: freshly seeded from OS entropy)
            check_invariants: If True, verify strategy and zero-sum invariants
                during every pass (slower)
            verbose: Print training progress
        """
        if reset_fraction is not None and not 0.0 <= reset_fraction <= 1.0:
            raise ValueError(f"reset_fraction must be in [0, 1], got {reset_fraction}")

        self.reset_fraction = reset_fraction
        self.rng = rng if rng is not None else np.random.default_rng()
        self.check_invariants = check_invariants
        self.verbose = verbose

        self.collection: NodeCollection = NodeCollection()
        self.iterations = 0

        self.initialize()

    def initialize(self) -> None:
        """Build the node collection over all 36 die pairs."""
        self.collection = build_node_collection()
        self.iterations = 0
        if self.verbose:
            print(f"Built {len(self.collection)} information sets, "
                  f"{self.collection.num_edges} structural edges")

    def _reset_iteration(self, num_iterations: int) -> Optional[int]:
        if self.reset_fraction is None:
            return None
        return int(num_iterations * self.reset_fraction)

    def train(self, iterations: int) -> None:
        """
        Run chance-sampled CFR iterations.

        Args:
            iterations: Number of iterations to run
        """
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")

        reset_at = self._reset_iteration(iterations)
        progress_every = max(1, iterations // 10)

        for i in range(1, iterations + 1):
            dice = roll_dice(self.rng)
            self.iterate_once(dice)

            if i == reset_at:
                self.reset_strategy_accumulators()
                if self.verbose:
                    print(f"  Iteration {i}: strategy accumulators reset")

            if self.verbose and i % progress_every == 0:
                print(f"  Iteration {i}/{iterations}")

    def iterate_once(self, dice: Sequence[int]) -> None:
        """
        Run one iteration for a given roll.

        Args:
            dice: (player 0 die, player 1 die)
        """
        identifiers = [root_identifier(p, dice[p]) for p in Player]
        slots = self.collection.ascending_slots(identifiers)
        arena = self.collection.holders

        for slot in slots:
            strategy = arena[slot].propagate_reach(arena)
            if self.check_invariants:
                check_strategy_invariant(strategy)

        for slot in reversed(slots):
            holder = arena[slot]
            total_utility = holder.backpropagate_utility(arena, dice)
            if self.check_invariants:
                self._check_delivered_utility(holder.first_available_action,
                                              holder.predecessors, total_utility)

        self.iterations += 1

    def _check_delivered_utility(
        self,
        first_available_action: int,
        predecessors: List[int],
        total_utility: float
    ) -> None:
        arena = self.collection.holders
        for slot in predecessors:
            node = arena[slot].node
            received = node.utility[first_available_action - node.first_available_action - 1]
            check_zero_sum_invariant(total_utility, received)

    def reset_strategy_accumulators(self) -> None:
        """Clear every node's average-strategy accumulator."""
        for holder in self.collection.holders:
            holder.node.reset_strategy_accumulator()

    def report(self) -> List[StrategyEntry]:
        """Average strategy of every information set, in ascending key order."""
        entries = []
        for holder in self.collection:
            node = holder.node
            entries.append(StrategyEntry(
                key=holder.key,
                player=node.player,
                roll=node.player_roll,
                history=node.history,
                actions=tuple(node.action_indices()),
                probabilities=node.average_strategy(),
            ))
        return entries

    def strategy_for(
        self,
        player: int,
        roll: int,
        history: Sequence[int] = ()
    ) -> Dict[str, float]:
        """
        Average strategy of one information set.

        Args:
            player: Acting player
            roll: Acting player's die
            history: Up to three most recent bids, oldest first

        Returns:
            {action_name: probability}
        """
        key = encode_key(history, player, roll)
        if key not in self.collection:
            raise KeyError(f"No information set for player={player}, roll={roll}, history={tuple(history)}")
        node = self.collection.holder(key).node
        return {
            action_name(a): float(p)
            for a, p in zip(node.action_indices(), node.average_strategy())
        }

    def print_results(self) -> None:
        """Print the average strategy for all information sets."""
        for entry in self.report():
            print(REPORT_SEPARATOR)
            print(f"player: {entry.player}")
            print(f"roll: {entry.roll}")
            print("history: " + "".join(f"{action_name(a)} " for a in entry.history))
            print()
            for name, prob in zip(entry.action_names(), entry.probabilities):
                print(f"{name}    {prob}")
