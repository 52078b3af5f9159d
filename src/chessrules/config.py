"""Session settings."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import PieceType
from chessrules.core.move import PROMOTION_TYPES


@dataclass(frozen=True)
class SessionSettings:
    """All caller-configurable knobs of a :class:`GameSession`."""

    # Piece a pawn becomes when a promoting move arrives without a choice.
    default_promotion: PieceType = PieceType.QUEEN

    # End the game automatically on the 75-move rule and fivefold repetition.
    automatic_draws: bool = True

    # On reset, also check the idle side's safety and the en passant target.
    # King count and back-rank pawns are always checked.
    strict_starting_position: bool = True

    def __post_init__(self) -> None:
        if self.default_promotion not in PROMOTION_TYPES:
            raise ValueError(
                f"default_promotion must be one of Q/R/B/N, got {self.default_promotion!r}"
            )
