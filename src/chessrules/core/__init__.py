"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import BoardState, Position, RulesEngine

    pos = Position.from_state(BoardState.initial())
    for move in RulesEngine.legal_moves(pos):
        print(move)
"""

from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    MoveFlag,
    PieceType,
)
from chessrules.core.move import PROMOTION_TYPES, Move, parse_promotion
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    move_to_san,
    position_from_fen,
    position_to_fen,
    state_from_fen,
    state_to_fen,
)
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import RulesEngine
from chessrules.core.state import BoardState
from chessrules.core.status import GameStatus
from chessrules.core.types import (
    Square,
    coerce_square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameEndReason",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Types / helpers
    "Square",
    "coerce_square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "BoardState",
    "GameStatus",
    "Move",
    "MoveGenerator",
    "PROMOTION_TYPES",
    "Piece",
    "Position",
    "RulesEngine",
    "parse_promotion",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "position_from_fen",
    "position_to_fen",
    "state_from_fen",
    "state_to_fen",
]
