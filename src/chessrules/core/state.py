"""BoardState: immutable snapshot of a complete position."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square, coerce_square, make_square, rank_of
from chessrules.core.zobrist import compute_key
from chessrules.errors import InvalidPosition

Grid = tuple[tuple[Piece | None, ...], ...]


@dataclass(frozen=True, slots=True)
class BoardState:
    """Piece placement plus side to move, castling, en passant and clocks.

    Instances are produced once per ply and never change afterwards; the
    rules engine works on a mutable :class:`~chessrules.core.position.Position`
    built from a state and hands back a fresh state.
    """

    placement: tuple[Piece | None, ...]
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    def __post_init__(self) -> None:
        if len(self.placement) != 64:
            raise InvalidPosition(
                f"Placement must have 64 squares, got {len(self.placement)}"
            )

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> BoardState:
        """Standard starting position."""
        return cls(placement=Board.initial().placement())

    @classmethod
    def from_fen(cls, fen: str) -> BoardState:
        """Parse a FEN string (see :mod:`chessrules.core.notation.fen`)."""
        from chessrules.core.notation.fen import state_from_fen

        return state_from_fen(fen)

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, square: str | Square) -> Piece | None:
        return self.placement[coerce_square(square)]

    @property
    def fen(self) -> str:
        from chessrules.core.notation.fen import state_to_fen

        return state_to_fen(self)

    @property
    def position_key(self) -> int:
        """Repetition key: placement, side, castling and en passant only."""
        return compute_key(
            self.placement, self.side_to_move, self.castling, self.en_passant
        )

    @property
    def white_can_castle_kingside(self) -> bool:
        return bool(self.castling & CastlingRights.WHITE_KINGSIDE)

    @property
    def white_can_castle_queenside(self) -> bool:
        return bool(self.castling & CastlingRights.WHITE_QUEENSIDE)

    @property
    def black_can_castle_kingside(self) -> bool:
        return bool(self.castling & CastlingRights.BLACK_KINGSIDE)

    @property
    def black_can_castle_queenside(self) -> bool:
        return bool(self.castling & CastlingRights.BLACK_QUEENSIDE)

    def grid(self, white_at_bottom: bool = True) -> Grid:
        """8x8 rank-major snapshot, first row is the top edge of the view.

        With ``white_at_bottom`` the first row is rank 8 read a→h (the
        layout UI boards render); otherwise rank 1 read h→a.
        """
        if white_at_bottom:
            ranks, files = range(7, -1, -1), range(8)
        else:
            ranks, files = range(8), range(7, -1, -1)
        return tuple(
            tuple(self.placement[make_square(f, r)] for f in files) for r in ranks
        )

    # ── Validation ───────────────────────────────────────────────────────

    def check_invariants(self) -> None:
        """Raise :class:`InvalidPosition` unless each side has exactly one
        king and no pawn stands on the first or last rank."""
        kings = {Color.WHITE: 0, Color.BLACK: 0}
        for sq, piece in enumerate(self.placement):
            if piece is None:
                continue
            if piece.piece_type == PieceType.KING:
                kings[piece.color] += 1
            elif piece.piece_type == PieceType.PAWN and rank_of(sq) in (0, 7):
                raise InvalidPosition(f"Pawn on back rank in {self.fen!r}")
        for color, count in kings.items():
            if count != 1:
                raise InvalidPosition(
                    f"Expected one {color} king, found {count} in {self.fen!r}"
                )

    def __str__(self) -> str:
        return self.fen
