"""
Game definitions layer (Layer 1 - lowest).

Action model, showdown payoff and information-set key encoding for Dudo.
It must not import from any other dudo_cfr layer.
"""

from dudo_cfr.games.base import Player, Action
from dudo_cfr.games.dudo import (
    NUM_PLAYERS,
    NUM_SIDES,
    NUM_ACTIONS,
    CHALLENGE,
    claim_count,
    claim_rank,
    is_terminal,
    action_name,
    challenge_payoff,
)
from dudo_cfr.games.infosets import (
    truncated_history,
    encode_key,
    decode_key,
    root_identifier,
)

__all__ = [
    'Player',
    'Action',
    'NUM_PLAYERS',
    'NUM_SIDES',
    'NUM_ACTIONS',
    'CHALLENGE',
    'claim_count',
    'claim_rank',
    'is_terminal',
    'action_name',
    'challenge_payoff',
    'truncated_history',
    'encode_key',
    'decode_key',
    'root_identifier',
]
