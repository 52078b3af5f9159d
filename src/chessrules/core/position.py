"""Position: mutable working copy of a game state with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.state import BoardState
from chessrules.core.types import Square, file_of, make_square, rank_of
from chessrules.core.zobrist import (
    castling_key,
    compute_key,
    en_passant_key,
    piece_key,
    side_to_move_key,
)

# Rook corner -> castling right lost when anything leaves or lands there.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}

_KING_RIGHTS: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_BOTH,
    Color.BLACK: CastlingRights.BLACK_BOTH,
}


@dataclass(slots=True)
class _UndoRecord:
    """Snapshot saved before each move so we can undo it."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured_piece: Piece | None


def _rook_slide(move: Move) -> tuple[Square, Square] | None:
    """(rook_from, rook_to) for a castling move, else None."""
    r = rank_of(move.from_sq)
    if move.flags & MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, r), make_square(5, r)
    if move.flags & MoveFlag.CASTLE_QUEENSIDE:
        return make_square(0, r), make_square(3, r)
    return None


def en_passant_victim(move: Move) -> Square:
    """Square of the pawn removed by an en passant capture.

    It sits beside the origin, i.e. on the destination file one rank behind
    the destination from the capturer's point of view.
    """
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


class Position:
    """Board + side to move + castling + en passant + clocks.

    Supports :meth:`make_move` / :meth:`unmake_move` via an internal undo
    stack, and keeps the position key of every ply played on it so that
    repetitions can be counted across a whole game.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_key",
        "_undo",
        "_key_stack",
        "_key_counts",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._key = compute_key(
            self.board.placement(), side_to_move, castling, en_passant
        )
        self._undo: list[_UndoRecord] = []
        self._key_stack: list[int] = [self._key]
        self._key_counts: dict[int, int] = {self._key: 1}

    # ── Conversion ───────────────────────────────────────────────────────

    @classmethod
    def from_state(cls, state: BoardState) -> Position:
        return cls(
            board=Board.from_placement(state.placement),
            side_to_move=state.side_to_move,
            castling=state.castling,
            en_passant=state.en_passant,
            halfmove_clock=state.halfmove_clock,
            fullmove_number=state.fullmove_number,
        )

    def snapshot(self) -> BoardState:
        """Freeze the current position into a :class:`BoardState`."""
        return BoardState(
            placement=self.board.placement(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move*, pushing undo state onto the stack.

        The move is trusted to be pseudo-legal for this position; legality
        is the move generator's job.
        """
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        capture_sq = move.to_sq
        if move.flags & MoveFlag.EN_PASSANT:
            capture_sq = en_passant_victim(move)
        captured = self.board[capture_sq]

        self._undo.append(
            _UndoRecord(
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                captured_piece=captured,
            )
        )

        self._put(move.from_sq, None)
        if captured is not None:
            self._put(capture_sq, None)

        placed = piece
        if move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        self._put(move.to_sq, placed)

        slide = _rook_slide(move)
        if slide is not None:
            rook_from, rook_to = slide
            rook = self.board[rook_from]
            assert rook is not None
            self._put(rook_from, None)
            self._put(rook_to, rook)

        next_ep: Square | None = None
        if move.flags & MoveFlag.DOUBLE_PAWN:
            next_ep = (move.from_sq + move.to_sq) // 2
        self._set_en_passant(next_ep)

        next_castling = self.castling
        if piece.piece_type == PieceType.KING:
            next_castling &= ~_KING_RIGHTS[piece.color]
        for sq in (move.from_sq, move.to_sq):
            if sq in _ROOK_CORNERS:
                next_castling &= ~_ROOK_CORNERS[sq]
        self._set_castling(next_castling)

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._key ^= side_to_move_key()
        self._key_stack.append(self._key)
        self._key_counts[self._key] = self._key_counts.get(self._key, 0) + 1

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`."""
        record = self._undo.pop()
        key = self._key_stack.pop()
        remaining = self._key_counts[key] - 1
        if remaining:
            self._key_counts[key] = remaining
        else:
            del self._key_counts[key]

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        piece = self.board[move.to_sq]
        assert piece is not None
        if move.promotion is not None:
            piece = Piece(piece.color, PieceType.PAWN)

        # The hash is restored wholesale from the key stack below.
        self.board[move.from_sq] = piece
        if move.flags & MoveFlag.EN_PASSANT:
            self.board[move.to_sq] = None
            self.board[en_passant_victim(move)] = record.captured_piece
        else:
            self.board[move.to_sq] = record.captured_piece

        slide = _rook_slide(move)
        if slide is not None:
            rook_from, rook_to = slide
            self.board[rook_from] = self.board[rook_to]
            self.board[rook_to] = None

        self.castling = record.castling
        self.en_passant = record.en_passant
        self.halfmove_clock = record.halfmove_clock
        self._key = self._key_stack[-1]

    # ── Incremental hashing ──────────────────────────────────────────────

    def _put(self, sq: Square, piece: Piece | None) -> None:
        old = self.board[sq]
        if old is not None:
            self._key ^= piece_key(old, sq)
        self.board[sq] = piece
        if piece is not None:
            self._key ^= piece_key(piece, sq)

    def _set_castling(self, castling: CastlingRights) -> None:
        if castling == self.castling:
            return
        self._key ^= castling_key(self.castling) ^ castling_key(castling)
        self.castling = castling

    def _set_en_passant(self, en_passant: Square | None) -> None:
        if en_passant == self.en_passant:
            return
        if self.en_passant is not None:
            self._key ^= en_passant_key(self.en_passant)
        self.en_passant = en_passant
        if en_passant is not None:
            self._key ^= en_passant_key(en_passant)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent copy, repetition history included, undo stack not."""
        pos = Position.from_state(self.snapshot())
        pos._key_stack = self._key_stack.copy()
        pos._key_counts = self._key_counts.copy()
        return pos

    @property
    def position_key(self) -> int:
        """Current repetition key (same value as ``BoardState.position_key``)."""
        return self._key

    @property
    def ply_keys(self) -> tuple[int, ...]:
        """Keys of every position seen on this object, oldest first."""
        return tuple(self._key_stack)

    def repetition_count(self) -> int:
        """How many times the current position key occurred in the history."""
        return self._key_counts.get(self._key, 0)

    def __repr__(self) -> str:
        return f"Position({self.snapshot().fen!r})"
