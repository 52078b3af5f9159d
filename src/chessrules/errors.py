"""Exception taxonomy for rejected requests.

Every error here is recoverable: raising one never leaves a
:class:`~chessrules.game.session.GameSession` half-updated.  Reaching
checkmate, stalemate or a draw is *not* an error.
"""

from __future__ import annotations

from typing import Any


class ChessRulesError(ValueError):
    """Base class for all rule-engine errors."""


class InvalidSquare(ChessRulesError):
    """Square text outside ``a1``..``h8`` (or an index outside 0..63)."""

    def __init__(self, square: Any) -> None:
        self.square = square
        super().__init__(f"Invalid square name: {square!r}")


class InvalidPosition(ChessRulesError):
    """Malformed FEN or a position that breaks board invariants."""


class IllegalMove(ChessRulesError):
    """Requested move is not in the legal-move set of the current position."""

    def __init__(
        self,
        from_sq: str,
        to_sq: str,
        promotion: str | None = None,
        reason: str = "not a legal move",
    ) -> None:
        self.from_sq = from_sq
        self.to_sq = to_sq
        self.promotion = promotion
        self.reason = reason
        request = f"{from_sq}{to_sq}{promotion or ''}"
        super().__init__(f"Illegal move {request}: {reason}")


class InvalidPromotionChoice(ChessRulesError):
    """Promotion piece requested for a non-promoting move, or an unusable kind."""

    def __init__(self, choice: Any, reason: str) -> None:
        self.choice = choice
        self.reason = reason
        super().__init__(f"Invalid promotion choice {choice!r}: {reason}")
