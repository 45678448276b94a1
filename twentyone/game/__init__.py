"""Round and match engines."""

from twentyone.game.events import EventEmitter, EventType, GameEvent
from twentyone.game.state import MatchState, RoundState
from twentyone.game.snapshot import HandView, MatchResult, MatchSnapshot, RoundResult, RoundSnapshot
from twentyone.game.round import Round
from twentyone.game.match import Match

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "RoundState",
    "MatchState",
    "HandView",
    "RoundResult",
    "RoundSnapshot",
    "MatchResult",
    "MatchSnapshot",
    "Round",
    "Match",
]
