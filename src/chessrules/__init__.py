"""chessrules: chess rules engine and game session.

Validates and applies moves (promotion, castling, en passant included) and
classifies positions: check, checkmate, stalemate, insufficient material,
and the claimable threefold-repetition and fifty-move draws.
"""

from chessrules.config import SessionSettings
from chessrules.core import (
    BoardState,
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    GameStatus,
    Move,
    MoveFlag,
    Piece,
    PieceType,
    RulesEngine,
)
from chessrules.errors import (
    ChessRulesError,
    IllegalMove,
    InvalidPosition,
    InvalidPromotionChoice,
    InvalidSquare,
)
from chessrules.game import GameSession, HistoryEntry, MoveResult

__all__ = [
    "BoardState",
    "CastlingRights",
    "ChessRulesError",
    "Color",
    "GameEndReason",
    "GameResult",
    "GameSession",
    "GameStatus",
    "HistoryEntry",
    "IllegalMove",
    "InvalidPosition",
    "InvalidPromotionChoice",
    "InvalidSquare",
    "Move",
    "MoveFlag",
    "MoveResult",
    "Piece",
    "PieceType",
    "RulesEngine",
    "SessionSettings",
]
