"""
Decision node: the learning state of one abstracted information set.

Local action offsets run from 0 (the node's first_available_action) up to
the challenge. The opening node has no challenge; every other node's last
local action is the challenge, whose utility comes straight from the
showdown. All other utilities are delivered by successors during the
backward pass.

Reach probabilities are accumulated per player across all structural
predecessors during the forward pass and consumed (then cleared) by
compute_utility during the backward pass.
"""

from typing import List, Optional, Sequence

import numpy as np

from dudo_cfr.games.dudo import NUM_ACTIONS, NUM_PLAYERS, challenge_payoff
from dudo_cfr.engine.ops import regret_match, average_strategy


class DecisionNode:
    """Regret, strategy and utility accumulators for one information set."""

    def __init__(
        self,
        first_available_action: int,
        roll: int,
        player: int,
        history: Optional[Sequence[int]] = None
    ):
        """
        Args:
            first_available_action: Lowest legal action index at this node
            roll: Acting player's die
            player: Acting player (0 or 1)
            history: Truncated bid history, oldest first (for reporting)
        """
        assert 0 <= first_available_action < NUM_ACTIONS, \
            f"Invalid first available action: {first_available_action}"
        assert player in (0, 1), f"Invalid player: {player}"

        self.player = int(player)
        self.opponent = (player + 1) % NUM_PLAYERS
        self.player_roll = roll
        self.first_available_action = first_available_action
        self.is_starting_node = first_available_action == 0
        self.history = tuple(history or ())

        num_actions = NUM_ACTIONS - first_available_action
        if self.is_starting_node:
            num_actions -= 1

        self.regret_sum = np.zeros(num_actions, dtype=np.float64)
        self.strategy = np.zeros(num_actions, dtype=np.float64)
        self.strategy_sum = np.zeros(num_actions, dtype=np.float64)
        self.utility = np.zeros(num_actions, dtype=np.float64)
        self.reach_probability_sum = np.zeros(NUM_PLAYERS, dtype=np.float64)
        self._reset_reach()

    @property
    def num_actions(self) -> int:
        return len(self.regret_sum)

    @property
    def is_terminal(self) -> bool:
        """Only the challenge is left."""
        return self.first_available_action == NUM_ACTIONS - 1

    def action_indices(self) -> List[int]:
        """Global action index of each local action."""
        return [self.first_available_action + a for a in range(self.num_actions)]

    def _reset_reach(self) -> None:
        self.reach_probability_sum[:] = 1.0 if self.is_starting_node else 0.0

    def compute_strategy(self) -> np.ndarray:
        """
        Regret-matching strategy for this iteration.

        Also accumulates the strategy into strategy_sum, weighted by the
        acting player's own reach probability.

        Returns:
            Copy of the current strategy
        """
        self.strategy[:] = regret_match(self.regret_sum)
        self.strategy_sum += self.strategy * self.reach_probability_sum[self.player]
        return self.strategy.copy()

    def receive_reach(
        self,
        predecessor_reach: Sequence[float],
        predecessor_strategy: Sequence[float],
        predecessor_first_available_action: int
    ) -> None:
        """
        Accumulate reach probability from one structural predecessor.

        The predecessor is played by this node's opponent, so only the
        opponent's reach is scaled by the probability of the bid that leads
        here; this player's own reach passes through unchanged.
        """
        action_index = self.first_available_action - predecessor_first_available_action - 1
        assert 0 <= action_index < len(predecessor_strategy), \
            f"Predecessor action offset {action_index} out of range " \
            f"(first available {predecessor_first_available_action} -> {self.first_available_action})"

        self.reach_probability_sum[self.opponent] += \
            predecessor_reach[self.opponent] * predecessor_strategy[action_index]
        self.reach_probability_sum[self.player] += predecessor_reach[self.player]

    def compute_utility(self, dice: Sequence[int]) -> float:
        """
        Expected utility of this node and regret update.

        Fills in the challenge payoff (when challenging is legal), then
        accumulates regret weighted by the opponent's reach. Clears the
        reach accumulator for the next forward pass.

        Args:
            dice: Both players' rolls for this iteration

        Returns:
            Expected utility of the current strategy for the acting player
        """
        if not self.is_starting_node:
            self.utility[-1] = challenge_payoff(dice, self.first_available_action - 1)

        total_utility = float(np.dot(self.strategy, self.utility))

        # Each action's own probability weights its utility before the
        # expected value is subtracted.
        regret = self.strategy * self.utility - total_utility
        self.regret_sum += self.reach_probability_sum[self.opponent] * regret

        self._reset_reach()
        return total_utility

    def receive_utility(
        self,
        successor_total_utility: float,
        successor_first_available_action: int
    ) -> None:
        """Record a successor's expected utility, negated for this player."""
        action_index = successor_first_available_action - self.first_available_action - 1
        assert 0 <= action_index < self.num_actions, \
            f"Successor action offset {action_index} out of range " \
            f"(first available {self.first_available_action} -> {successor_first_available_action})"

        self.utility[action_index] = -successor_total_utility

    def reset_strategy_accumulator(self) -> None:
        """Discard the accumulated average strategy."""
        self.strategy_sum[:] = 0.0

    def average_strategy(self) -> np.ndarray:
        """Normalized copy of strategy_sum (uniform if nothing accumulated)."""
        return average_strategy(self.strategy_sum)

    def __repr__(self) -> str:
        return (
            f"DecisionNode(player={self.player}, roll={self.player_roll}, "
            f"history={self.history}, first_available_action={self.first_available_action})"
        )
