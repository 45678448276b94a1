"""Round and match state enumerations."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: DEALING → USER_TURN → DEALER_TURN → SETTLEMENT → DONE
    A busted user goes from USER_TURN straight to SETTLEMENT.
    """

    DEALING = auto()
    USER_TURN = auto()
    DEALER_TURN = auto()
    SETTLEMENT = auto()
    DONE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()


class MatchState(Enum):
    """
    Match state machine states.

    Flow: READY ⇄ IN_ROUND → MATCH_OVER → READY (on reset)
    """

    READY = auto()
    IN_ROUND = auto()
    MATCH_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()


ROUND_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.DEALING: [RoundState.USER_TURN],
    RoundState.USER_TURN: [RoundState.DEALER_TURN, RoundState.SETTLEMENT],  # SETTLEMENT on bust
    RoundState.DEALER_TURN: [RoundState.SETTLEMENT],
    RoundState.SETTLEMENT: [RoundState.DONE],
    RoundState.DONE: [],
}

MATCH_TRANSITIONS: dict[MatchState, list[MatchState]] = {
    MatchState.READY: [MatchState.IN_ROUND, MatchState.READY],
    MatchState.IN_ROUND: [MatchState.READY, MatchState.MATCH_OVER],
    MatchState.MATCH_OVER: [MatchState.READY],
}


def is_valid_transition(from_state: RoundState | MatchState, to_state: RoundState | MatchState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    if isinstance(from_state, RoundState):
        return to_state in ROUND_TRANSITIONS.get(from_state, [])
    return to_state in MATCH_TRANSITIONS.get(from_state, [])
