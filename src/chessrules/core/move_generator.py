"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.board import iter_bitboard
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import PROMOTION_TYPES, Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessrules.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        f, r = file_of(sq), rank_of(sq)
        targets.append(
            tuple(
                make_square(f + df, r + dr)
                for df, dr in offsets
                if 0 <= f + df < 8 and 0 <= r + dr < 8
            )
        )
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af, ar = file_of(sq) + df, rank_of(sq) + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _to_mask(squares: tuple[Square, ...]) -> int:
    mask = 0
    for sq in squares:
        mask |= 1 << sq
    return mask


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = tuple(_to_mask(t) for t in _KNIGHT_TARGETS)
_KING_ATTACK_MASKS = tuple(_to_mask(t) for t in _KING_TARGETS)

# [color][sq] -> squares from which a pawn of *color* would attack *sq*.
_PAWN_ATTACKER_MASKS = (
    tuple(_to_mask(t) for t in _build_targets(((-1, -1), (1, -1)))),
    tuple(_to_mask(t) for t in _build_targets(((-1, 1), (1, 1)))),
)

_SLIDER_RAYS: dict[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]] = {
    PieceType.BISHOP: _build_rays(BISHOP_DIRS),
    PieceType.ROOK: _build_rays(ROOK_DIRS),
    PieceType.QUEEN: _build_rays(QUEEN_DIRS),
}

# Per colour: pawn push direction, start rank, rank a pawn promotes from.
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int]] = {
    Color.WHITE: (8, 1, 6),
    Color.BLACK: (-8, 6, 1),
}

# Per colour and side: right, squares that must be empty, squares the king
# crosses or lands on (must not be attacked), king destination, rook corner.
_CASTLING_PATHS: dict[
    Color,
    tuple[tuple[CastlingRights, MoveFlag, tuple[int, ...], tuple[int, ...], int, int], ...],
] = {
    color: (
        (
            kingside,
            MoveFlag.CASTLE_KINGSIDE,
            (base + 5, base + 6),
            (base + 5, base + 6),
            base + 6,
            base + 7,
        ),
        (
            queenside,
            MoveFlag.CASTLE_QUEENSIDE,
            (base + 1, base + 2, base + 3),
            (base + 3, base + 2),
            base + 2,
            base + 0,
        ),
    )
    for color, base, kingside, queenside in (
        (
            Color.WHITE,
            0,
            CastlingRights.WHITE_KINGSIDE,
            CastlingRights.WHITE_QUEENSIDE,
        ),
        (
            Color.BLACK,
            56,
            CastlingRights.BLACK_KINGSIDE,
            CastlingRights.BLACK_QUEENSIDE,
        ),
    )
}


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    while filtering for legality but always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, from_sq: Square | None = None) -> list[Move]:
        """All strictly legal moves for the side to move.

        With *from_sq* only moves of the piece on that square are returned.
        """
        legal: list[Move] = []
        moving_color = self._pos.side_to_move
        for move in self.generate_pseudo_legal_moves(from_sq):
            self._pos.make_move(move)
            if not self.is_in_check(moving_color):
                legal.append(move)
            self._pos.unmake_move(move)
        return legal

    def generate_pseudo_legal_moves(self, from_sq: Square | None = None) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        if from_sq is None:
            squares = iter_bitboard(self._board.all_pieces_bitboard(color))
        else:
            squares = iter_bitboard(
                self._board.all_pieces_bitboard(color) & (1 << from_sq)
            )
        for sq in squares:
            piece = self._board[sq]
            assert piece is not None
            self._gen_piece(sq, piece, moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self._board.king_square(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Computed straight from piece geometry, never through move
        generation, so it is safe to call while filtering for legality.
        """
        board = self._board

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[int(by_color)][sq]
        ):
            return True
        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
        for slider in (PieceType.BISHOP, PieceType.ROOK):
            if not (board.pieces_bitboard(by_color, slider) | queens):
                continue
            for ray in _SLIDER_RAYS[slider][sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        slider,
                        PieceType.QUEEN,
                    ):
                        return True
                    break
        return False

    # -- Piece dispatch (private) ------------------------------------------

    def _gen_piece(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif ptype == PieceType.KNIGHT:
            self._gen_jumps(sq, piece.color, _KNIGHT_TARGETS[sq], moves)
        elif ptype == PieceType.KING:
            self._gen_jumps(sq, piece.color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, piece.color, moves)
        else:
            self._gen_sliding(sq, piece.color, _SLIDER_RAYS[ptype][sq], moves)

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step, start_rank, promo_rank = _PAWN_GEOMETRY[color]
        rank_idx = rank_of(sq)
        promotes = rank_idx == promo_rank

        one_step = sq + step
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, MoveFlag.NONE, promotes, moves)
            two_step = one_step + step
            if rank_idx == start_rank and board.is_empty(two_step):
                moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            if not 0 <= file_of(sq) + df < 8:
                continue
            cap_sq = one_step + df
            target = board[cap_sq]
            if target is not None and target.color != color:
                self._add_pawn_move(sq, cap_sq, MoveFlag.CAPTURE, promotes, moves)
            elif (
                target is None
                and cap_sq == self._pos.en_passant
                and board[make_square(file_of(cap_sq), rank_idx)]
                == Piece(color.opposite, PieceType.PAWN)
            ):
                moves.append(
                    Move(sq, cap_sq, MoveFlag.CAPTURE | MoveFlag.EN_PASSANT)
                )

    @staticmethod
    def _add_pawn_move(
        from_sq: Square,
        to_sq: Square,
        flags: MoveFlag,
        promotes: bool,
        moves: list[Move],
    ) -> None:
        if not promotes:
            moves.append(Move(from_sq, to_sq, flags))
            return
        for pt in PROMOTION_TYPES:
            moves.append(Move(from_sq, to_sq, flags | MoveFlag.PROMOTION, pt))

    def _gen_jumps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq))
            elif target.color != color:
                moves.append(Move(sq, to_sq, MoveFlag.CAPTURE))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, MoveFlag.CAPTURE))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        """Castling moves, already screened for passing through check."""
        home = 4 if color == Color.WHITE else 60
        if king_sq != home or not self._pos.castling:
            return

        board = self._board
        opponent = color.opposite
        own_rook = Piece(color, PieceType.ROOK)
        in_check: bool | None = None

        for right, flag, empty, crossed, king_to, rook_sq in _CASTLING_PATHS[color]:
            if not self._pos.castling & right or board[rook_sq] != own_rook:
                continue
            if not all(board.is_empty(s) for s in empty):
                continue
            if in_check is None:
                in_check = self.is_square_attacked(king_sq, opponent)
            if in_check:
                return
            if any(self.is_square_attacked(s, opponent) for s in crossed):
                continue
            moves.append(Move(king_sq, king_to, flag))
