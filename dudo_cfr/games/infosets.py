"""
Information-set keys for Dudo with truncated recall.

A player observes their own die and the public sequence of bids, but only
the three most recent bids are remembered. The abstracted information set
(player, roll, last <= 3 bids) is packed into a single integer:

    bits 0..2    player's roll (1..6)
    bit  3       acting player
    bits 4..7    most recent bid + 1
    bits 8..11   previous bid + 1
    bits 12..15  oldest remembered bid + 1

Bids are stored offset by one so that an empty nibble (0) means "no bid".
Histories sharing the same last three bids collide on purpose.

Because legal bids strictly increase, extending a history either fills a
higher nibble or shifts a strictly larger bid into the top nibble, so a
successor's key is always numerically greater than its predecessor's. The
trainer relies on this to visit nodes in topological order by sorting keys.
"""

from typing import Sequence, Tuple

from .dudo import NUM_ACTIONS, NUM_SIDES

HISTORY_LENGTH = 3
NIBBLE_BITS = 4
IDENTIFIER_MASK = 0xF
PLAYER_SHIFT = 3
ROLL_MASK = 0x7

History = Tuple[int, ...]


def truncated_history(claimed_flags: Sequence[bool]) -> History:
    """
    The (at most) three most recently claimed bids, oldest first.

    Args:
        claimed_flags: claimed_flags[a] is True if bid a has been made

    Returns:
        Tuple of action indices in increasing (chronological) order
    """
    history = []
    for action in range(len(claimed_flags) - 1, -1, -1):
        if len(history) == HISTORY_LENGTH:
            break
        if claimed_flags[action]:
            history.append(action)
    return tuple(reversed(history))


def first_available_action(claimed_flags: Sequence[bool]) -> int:
    """Lowest legal action index: one past the last claimed bid, 0 if none."""
    for action in range(len(claimed_flags) - 1, -1, -1):
        if claimed_flags[action]:
            return action + 1
    return 0


def root_identifier(player: int, roll: int) -> int:
    """The (player, roll) part of a key, shared by all of a player's nodes for that roll."""
    assert player in (0, 1), f"Invalid player: {player}"
    assert 1 <= roll <= NUM_SIDES, f"Invalid roll: {roll}"
    return player << PLAYER_SHIFT | roll


def key_identifier(key: int) -> int:
    """Low four bits of a key (see root_identifier)."""
    return key & IDENTIFIER_MASK


def encode_key(history: Sequence[int], player: int, roll: int) -> int:
    """
    Pack an abstracted information set into an integer key.

    Args:
        history: Up to three bids, oldest first
        player: Acting player (0 or 1)
        roll: Acting player's die

    Returns:
        Unsigned integer key
    """
    assert len(history) <= HISTORY_LENGTH, f"History too long: {history}"
    key = root_identifier(player, roll)
    for shift, action in enumerate(reversed(history), start=1):
        assert 0 <= action < NUM_ACTIONS - 1, f"Not a bid action: {action}"
        key |= (action + 1) << (NIBBLE_BITS * shift)
    return key


def decode_key(key: int) -> Tuple[int, int, History]:
    """
    Inverse of encode_key.

    Returns:
        (player, roll, history) with history oldest first
    """
    player = (key >> PLAYER_SHIFT) & 1
    roll = key & ROLL_MASK
    history = []
    for shift in range(1, HISTORY_LENGTH + 1):
        nibble = (key >> (NIBBLE_BITS * shift)) & IDENTIFIER_MASK
        if nibble == 0:
            break
        history.append(nibble - 1)
    return player, roll, tuple(reversed(history))
