"""RulesEngine: move resolution, move application and status evaluation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, GameEndReason, GameResult, PieceType
from chessrules.core.move import Move, parse_promotion
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.piece import Piece, piece_letter
from chessrules.core.position import Position
from chessrules.core.status import GameStatus
from chessrules.core.types import (
    Square,
    coerce_square,
    is_light_square,
    rank_of,
    square_name,
)
from chessrules.errors import IllegalMove, InvalidPosition, InvalidPromotionChoice

if TYPE_CHECKING:
    from chessrules.core.state import BoardState

_LOGGER = logging.getLogger(__name__)

FIFTY_MOVE_PLIES = 100
SEVENTY_FIVE_MOVE_PLIES = 150

_MINORS = (PieceType.KNIGHT, PieceType.BISHOP)


class RulesEngine:
    """Stateless rule-checker that operates on a :class:`Position`.

    Draw policy:
    - Claim-based draws: fifty-move rule, threefold repetition.
    - Automatic draws: insufficient material, plus (unless disabled)
      the seventy-five-move rule and fivefold repetition.
    """

    # ── Move queries ─────────────────────────────────────────────────────

    @staticmethod
    def legal_moves(position: Position, from_sq: Square | None = None) -> list[Move]:
        return MoveGenerator(position).generate_legal_moves(from_sq)

    @staticmethod
    def pseudo_legal_moves(position: Position) -> list[Move]:
        return MoveGenerator(position).generate_pseudo_legal_moves()

    @staticmethod
    def resolve_move(
        position: Position,
        from_sq: str | Square,
        to_sq: str | Square,
        promotion: PieceType | str | None = None,
        default_promotion: PieceType = PieceType.QUEEN,
    ) -> Move:
        """Turn a (from, to, promotion) request into the matching legal move.

        A promoting request without a choice resolves to *default_promotion*.

        Raises:
            InvalidSquare: malformed square, before any board lookup.
            InvalidPromotionChoice: unusable piece kind, or a choice given
                for a move that does not promote.
            IllegalMove: no legal move matches the squares.
        """
        src = coerce_square(from_sq)
        dst = coerce_square(to_sq)
        choice = parse_promotion(promotion)

        candidates = [
            m for m in RulesEngine.legal_moves(position, src) if m.to_sq == dst
        ]
        if not candidates:
            raise IllegalMove(
                square_name(src),
                square_name(dst),
                piece_letter(choice) if choice is not None else None,
                RulesEngine._explain_rejection(position, src, dst),
            )

        if not candidates[0].is_promotion:
            if choice is not None:
                raise InvalidPromotionChoice(promotion, "move does not promote")
            return candidates[0]

        wanted = choice if choice is not None else default_promotion
        for move in candidates:
            if move.promotion == wanted:
                return move
        raise InvalidPromotionChoice(wanted, "pawns may only promote to Q, R, B or N")

    @staticmethod
    def _explain_rejection(position: Position, src: Square, dst: Square) -> str:
        piece = position.board[src]
        if piece is None:
            return f"no piece on {square_name(src)}"
        if piece.color != position.side_to_move:
            return f"it is {position.side_to_move}'s turn"
        if src == dst:
            return "origin and destination are the same square"
        gen = MoveGenerator(position)
        if any(m.to_sq == dst for m in gen.generate_pseudo_legal_moves(src)):
            return "move would leave the king in check"
        return f"{piece.description} cannot move to {square_name(dst)}"

    # ── Move application ─────────────────────────────────────────────────

    @staticmethod
    def apply_move(state: BoardState, move: Move) -> BoardState:
        """Next :class:`BoardState` after *move*; *state* is left untouched.

        Raises :class:`IllegalMove` if *move* is not legal in *state*.
        """
        position = Position.from_state(state)
        if move not in RulesEngine.legal_moves(position, move.from_sq):
            raise IllegalMove(
                square_name(move.from_sq),
                square_name(move.to_sq),
                piece_letter(move.promotion) if move.promotion is not None else None,
            )
        position.make_move(move)
        return position.snapshot()

    @staticmethod
    def validate_start(state: BoardState) -> None:
        """Reject starting positions no legal game could reach.

        Besides the board invariants, the side that just moved must not be
        in check (its king would be capturable), and an en passant target
        must sit behind a pawn that could have just advanced two squares.
        """
        state.check_invariants()
        if state.en_passant is not None:
            RulesEngine._validate_en_passant(state, state.en_passant)
        gen = MoveGenerator(Position.from_state(state))
        if gen.is_in_check(state.side_to_move.opposite):
            raise InvalidPosition(
                f"Side not to move is in check in {state.fen!r}"
            )

    @staticmethod
    def _validate_en_passant(state: BoardState, ep: Square) -> None:
        pusher = state.side_to_move.opposite
        forward, ep_rank = (8, 2) if pusher == Color.WHITE else (-8, 5)
        if (
            rank_of(ep) != ep_rank
            or state.placement[ep] is not None
            or state.placement[ep + forward] != Piece(pusher, PieceType.PAWN)
            or state.placement[ep - forward] is not None
        ):
            raise InvalidPosition(
                f"En-passant square {square_name(ep)} does not follow a double "
                f"pawn push in {state.fen!r}"
            )

    # ── Individual conditions ────────────────────────────────────────────

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return RulesEngine.is_in_check(position) and not RulesEngine.legal_moves(
            position
        )

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return not RulesEngine.is_in_check(position) and not RulesEngine.legal_moves(
            position
        )

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+minor vs K, K+B vs K+B with same-colour bishops."""
        board = position.board
        total = board.occupied_count()

        if total == 2:
            return True

        if total == 3:
            return any(
                board.has_piece(color, minor)
                for color in Color
                for minor in _MINORS
            )

        if total == 4:
            white = board.pieces(Color.WHITE, PieceType.BISHOP)
            black = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(white) == 1 and len(black) == 1:
                return is_light_square(white[0]) == is_light_square(black[0])

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= FIFTY_MOVE_PLIES

    @staticmethod
    def is_seventy_five_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= SEVENTY_FIVE_MOVE_PLIES

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= 3

    @staticmethod
    def is_fivefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= 5

    @staticmethod
    def is_claimable_draw(position: Position) -> bool:
        """Whether the side to move may claim an immediate draw by rule."""
        return RulesEngine.is_fifty_move_rule(
            position
        ) or RulesEngine.is_threefold_repetition(position)

    @staticmethod
    def is_automatic_draw(position: Position) -> bool:
        """Draws that end the game without any claim."""
        return (
            RulesEngine.is_insufficient_material(position)
            or RulesEngine.is_seventy_five_move_rule(position)
            or RulesEngine.is_fivefold_repetition(position)
        )

    # ── Aggregate ────────────────────────────────────────────────────────

    @staticmethod
    def evaluate(position: Position, automatic_draws: bool = True) -> GameStatus:
        """Classify *position* from scratch.

        Precedence: checkmate, stalemate, insufficient material, then (when
        *automatic_draws*) the seventy-five-move rule and fivefold
        repetition.  Threefold and fifty-move are reported as claimable only.
        """
        gen = MoveGenerator(position)
        side = position.side_to_move
        in_check = gen.is_in_check(side)
        legal_count = len(gen.generate_legal_moves())
        repetitions = position.repetition_count()

        result = GameResult.IN_PROGRESS
        reason: GameEndReason | None = None
        insufficient = False

        if legal_count == 0:
            if in_check:
                result = (
                    GameResult.BLACK_WINS if side == Color.WHITE else GameResult.WHITE_WINS
                )
                reason = GameEndReason.CHECKMATE
            else:
                result, reason = GameResult.DRAW, GameEndReason.STALEMATE
        elif RulesEngine.is_insufficient_material(position):
            insufficient = True
            result, reason = GameResult.DRAW, GameEndReason.INSUFFICIENT_MATERIAL
        elif automatic_draws and RulesEngine.is_seventy_five_move_rule(position):
            result, reason = GameResult.DRAW, GameEndReason.SEVENTY_FIVE_MOVE_RULE
        elif automatic_draws and RulesEngine.is_fivefold_repetition(position):
            result, reason = GameResult.DRAW, GameEndReason.FIVEFOLD_REPETITION

        status = GameStatus(
            side_to_move=side,
            in_check=in_check,
            checkmate=reason == GameEndReason.CHECKMATE,
            stalemate=reason == GameEndReason.STALEMATE,
            insufficient_material=insufficient,
            can_claim_threefold=repetitions >= 3,
            can_claim_fifty_move=RulesEngine.is_fifty_move_rule(position),
            repetition_count=repetitions,
            halfmove_clock=position.halfmove_clock,
            legal_move_count=legal_count,
            result=result,
            reason=reason,
        )
        if status.is_game_over:
            _LOGGER.debug("Terminal position: %s (%s)", result.name, reason)
        return status

    @staticmethod
    def game_result(position: Position) -> GameResult:
        return RulesEngine.evaluate(position).result
