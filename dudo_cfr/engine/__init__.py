"""
Compute engine layer (Layer 2).

Regret matching and the per-information-set DecisionNode.
It may only import from: dudo_cfr.games
"""

from dudo_cfr.engine.ops import (
    uniform_strategy,
    regret_match,
    average_strategy,
    check_strategy_invariant,
    check_zero_sum_invariant,
)
from dudo_cfr.engine.node import DecisionNode

__all__ = [
    'uniform_strategy',
    'regret_match',
    'average_strategy',
    'check_strategy_invariant',
    'check_zero_sum_invariant',
    'DecisionNode',
]
