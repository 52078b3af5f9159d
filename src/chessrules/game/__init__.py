"""Game session layer: the mutable wrapper callers hold.

Quick start::

    from chessrules.game import GameSession

    session = GameSession()
    session.attempt_move("e2", "e4")
    print(session.status().message, session.fen)
"""

from chessrules.game.session import GameSession, HistoryEntry, MoveResult

__all__ = [
    "GameSession",
    "HistoryEntry",
    "MoveResult",
]
