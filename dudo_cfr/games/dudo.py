"""
Dudo action model and showdown rules.

Two players each roll one six-sided die and bid alternately on how many
dice (of both players) show a given rank. Ones are wild. Instead of raising,
a player may challenge ("Dudo") the previous bid, which ends the round.

Bids are laid out in a fixed strict total order:

    index:  0     1     2     3     4     5     6     7   ...  11    12
    bid:   1*2   1*3   1*4   1*5   1*6   1*1   2*2   2*3  ...  2*1   DUDO

A bid is only legal if its index is greater than every bid made before it.
The challenge is the reserved terminal index 12. It is never "claimed"; it
is available at every decision point except the opening one.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .base import Action


NUM_PLAYERS = 2
NUM_SIDES = 6
NUM_ACTIONS = 2 * NUM_SIDES + 1
CHALLENGE = NUM_ACTIONS - 1
WILD_RANK = 1

CLAIM_COUNT = (1, 1, 1, 1, 1, 1, 2, 2, 2, 2, 2, 2)
CLAIM_RANK = (2, 3, 4, 5, 6, 1, 2, 3, 4, 5, 6, 1)

CHALLENGE_NAME = 'DUDO'


def _check_bid(action: int) -> None:
    assert 0 <= action < CHALLENGE, f"Not a bid action: {action}"


def claim_count(action: int) -> int:
    """Number of dice claimed by a bid."""
    _check_bid(action)
    return CLAIM_COUNT[action]


def claim_rank(action: int) -> int:
    """Die face claimed by a bid."""
    _check_bid(action)
    return CLAIM_RANK[action]


def is_terminal(action: int) -> bool:
    """True for the challenge action, which ends the round."""
    assert 0 <= action < NUM_ACTIONS, f"Action out of range: {action}"
    return action == CHALLENGE


def action_name(action: int) -> str:
    """Human-readable label: ``(count*rank)`` for bids, ``DUDO`` for the challenge."""
    if is_terminal(action):
        return CHALLENGE_NAME
    return f"({CLAIM_COUNT[action]}*{CLAIM_RANK[action]})"


ACTIONS: Tuple[Action, ...] = tuple(
    Action(id=a, name=action_name(a), count=CLAIM_COUNT[a], rank=CLAIM_RANK[a])
    for a in range(CHALLENGE)
) + (Action(id=CHALLENGE, name=CHALLENGE_NAME),)


def count_matching(dice: Sequence[int], rank: int) -> int:
    """Number of dice showing ``rank`` or the wild face."""
    return sum(1 for die in dice if die == rank or die == WILD_RANK)


def challenge_payoff(dice: Sequence[int], claimed_action: int) -> float:
    """
    Payoff to the player who challenges ``claimed_action``.

    The challenger wins (+1) iff the claimed count is strictly greater than
    the number of matching dice, and loses (-1) otherwise.

    Args:
        dice: Both players' rolls
        claimed_action: The bid being challenged

    Returns:
        +1.0 or -1.0
    """
    actual = count_matching(dice, claim_rank(claimed_action))
    return 1.0 if claim_count(claimed_action) > actual else -1.0


def roll_dice(rng: np.random.Generator) -> Tuple[int, int]:
    """Roll one die per player."""
    d0, d1 = rng.integers(1, NUM_SIDES + 1, size=NUM_PLAYERS)
    return int(d0), int(d1)


def all_die_pairs() -> List[Tuple[int, int]]:
    """All 36 (d0, d1) outcomes, player 1's die varying slowest."""
    return [
        (d0, d1)
        for d0 in range(1, NUM_SIDES + 1)
        for d1 in range(1, NUM_SIDES + 1)
    ]
