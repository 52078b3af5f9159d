"""GameStatus: the classification returned after every ply."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color, GameEndReason, GameResult

_END_MESSAGES: dict[GameEndReason, str] = {
    GameEndReason.CHECKMATE: "Checkmate - Game over.",
    GameEndReason.STALEMATE: "Stalemate - Game over.",
    GameEndReason.INSUFFICIENT_MATERIAL: "Draw - Insufficient material.",
    GameEndReason.THREEFOLD_REPETITION: "Draw - Threefold repetition.",
    GameEndReason.FIFTY_MOVE_RULE: "Draw - Fifty-move rule.",
    GameEndReason.FIVEFOLD_REPETITION: "Draw - Fivefold repetition.",
    GameEndReason.SEVENTY_FIVE_MOVE_RULE: "Draw - Seventy-five-move rule.",
}


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Terminal / non-terminal classification of a position.

    ``can_claim_threefold`` and ``can_claim_fifty_move`` never end the game
    by themselves; a caller has to claim them.
    """

    side_to_move: Color
    in_check: bool = False
    checkmate: bool = False
    stalemate: bool = False
    insufficient_material: bool = False
    can_claim_threefold: bool = False
    can_claim_fifty_move: bool = False
    repetition_count: int = 1
    halfmove_clock: int = 0
    legal_move_count: int = 0
    result: GameResult = GameResult.IN_PROGRESS
    reason: GameEndReason | None = None

    @property
    def is_game_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    @property
    def is_draw(self) -> bool:
        return self.result == GameResult.DRAW

    @property
    def can_claim_draw(self) -> bool:
        return not self.is_game_over and (
            self.can_claim_threefold or self.can_claim_fifty_move
        )

    @property
    def winner(self) -> Color | None:
        if self.result == GameResult.WHITE_WINS:
            return Color.WHITE
        if self.result == GameResult.BLACK_WINS:
            return Color.BLACK
        return None

    @property
    def message(self) -> str:
        """One-line narration for a status bar; empty while nothing notable."""
        if self.reason is not None and self.is_game_over:
            return _END_MESSAGES[self.reason]
        claims = []
        if self.can_claim_threefold:
            claims.append("Threefold repetition")
        if self.can_claim_fifty_move:
            claims.append("Fifty-move rule")
        parts = []
        if self.in_check:
            parts.append("You are in check.")
        if claims:
            parts.append(f"Draw available to claim - {' / '.join(claims)}.")
        return " ".join(parts)
