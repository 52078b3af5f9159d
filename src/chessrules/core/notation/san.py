"""SAN (Standard Algebraic Notation) rendering for move history."""

from __future__ import annotations

from chessrules.core.enums import MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.position import Position
from chessrules.core.types import file_of, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    board = position.board
    rivals = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and (p := board[m.from_sq]) is not None
        and p.piece_type == piece_type
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return square_name(move.from_sq)[0]
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return square_name(move.from_sq)[1]
    return square_name(move.from_sq)


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move.

    *position* is used as scratch space and restored before returning.
    """
    piece = position.board[move.from_sq]
    assert piece is not None

    if move.flags & MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flags & MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        if piece.piece_type == PieceType.PAWN:
            san = square_name(move.from_sq)[0] if move.is_capture else ""
        else:
            san = _SAN_PIECE[piece.piece_type] + _disambiguation(
                position, move, piece.piece_type
            )
        if move.is_capture:
            san += "x"
        san += square_name(move.to_sq)
        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    position.make_move(move)
    gen_after = MoveGenerator(position)
    if gen_after.is_in_check(position.side_to_move):
        san += "+" if gen_after.generate_legal_moves() else "#"
    position.unmake_move(move)

    return san
