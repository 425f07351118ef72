"""
Per-information-set CFR operations.

Regret matching, average-strategy normalization and the invariant checks
used when the trainer runs with check_invariants=True. All functions work
on the short per-node action vectors held by DecisionNode.
"""

import numpy as np


def uniform_strategy(num_actions: int) -> np.ndarray:
    """Equal probability for every action."""
    assert num_actions > 0, f"Need at least one action, got {num_actions}"
    return np.full(num_actions, 1.0 / num_actions, dtype=np.float64)


def regret_match(regret_sum: np.ndarray) -> np.ndarray:
    """
    Convert cumulative regrets to a strategy via regret matching.

        positive_regrets = max(0, regret_sum)
        if sum(positive_regrets) > 0:
            strategy = positive_regrets / sum(positive_regrets)
        else:
            strategy = uniform over actions

    Args:
        regret_sum: Cumulative regrets, one per action

    Returns:
        strategy: Valid probability distribution over the same actions
    """
    positive = np.maximum(regret_sum, 0.0)
    normalizing_sum = positive.sum()
    if normalizing_sum > 0:
        return positive / normalizing_sum
    return uniform_strategy(len(regret_sum))


def average_strategy(strategy_sum: np.ndarray) -> np.ndarray:
    """
    Normalize an accumulated strategy into a distribution.

    Uniform when nothing has been accumulated (sum exactly zero).
    """
    normalizing_sum = strategy_sum.sum()
    if normalizing_sum != 0:
        return strategy_sum / normalizing_sum
    return uniform_strategy(len(strategy_sum))


# =============================================================================
# Invariant checks for debugging CFR
# =============================================================================

def check_strategy_invariant(strategy: np.ndarray, tolerance: float = 1e-9) -> bool:
    """
    Check that a strategy is a probability distribution.

    Returns:
        True if invariant holds, raises AssertionError otherwise
    """
    assert np.all(strategy >= 0.0), f"Negative probability in strategy: {strategy}"
    total = strategy.sum()
    assert abs(total - 1.0) < tolerance, \
        f"Strategy does not sum to 1: sum={total:.12f}, strategy={strategy}"
    return True


def check_zero_sum_invariant(
    successor_total_utility: float,
    received_utility: float,
    tolerance: float = 1e-12
) -> bool:
    """
    Check zero-sum across a turn boundary: what a predecessor records for an
    action is the negation of the successor's expected utility.

    Returns:
        True if invariant holds, raises AssertionError otherwise
    """
    assert abs(successor_total_utility + received_utility) < tolerance, \
        f"Zero-sum invariant violated: successor={successor_total_utility:.6f}, " \
        f"predecessor received={received_utility:.6f}"
    return True
