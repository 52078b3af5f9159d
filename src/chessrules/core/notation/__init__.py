"""Notation package: FEN parsing / serialization and SAN rendering."""

from chessrules.core.notation.fen import (
    STARTING_FEN,
    position_from_fen,
    position_to_fen,
    state_from_fen,
    state_to_fen,
)
from chessrules.core.notation.san import move_to_san

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "state_from_fen",
    "state_to_fen",
    "move_to_san",
]
