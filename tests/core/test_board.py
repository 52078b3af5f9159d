"""Tests for Board."""

import pytest

from chessrules.core.board import Board, iter_bitboard
from chessrules.core.enums import Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import (
    A1, B1, C1, D1, E1, F1, G1, H1,
    E2,
    A8, B8, C8, D8, E8, F8, G8, H8,
    E4,
)


class TestBoardInitial:
    def test_white_king_position(self) -> None:
        board = Board.initial()
        assert board[E1] == Piece(Color.WHITE, PieceType.KING)

    def test_black_king_position(self) -> None:
        board = Board.initial()
        assert board[E8] == Piece(Color.BLACK, PieceType.KING)

    def test_back_ranks_mirror(self) -> None:
        board = Board.initial()
        expected = [
            (A1, A8, PieceType.ROOK), (B1, B8, PieceType.KNIGHT),
            (C1, C8, PieceType.BISHOP), (D1, D8, PieceType.QUEEN),
            (E1, E8, PieceType.KING), (F1, F8, PieceType.BISHOP),
            (G1, G8, PieceType.KNIGHT), (H1, H8, PieceType.ROOK),
        ]
        for white_sq, black_sq, pt in expected:
            assert board[white_sq] == Piece(Color.WHITE, pt)
            assert board[black_sq] == Piece(Color.BLACK, pt)

    def test_pawn_ranks(self) -> None:
        board = Board.initial()
        assert all(8 <= sq < 16 for sq in board.pieces(Color.WHITE, PieceType.PAWN))
        assert all(48 <= sq < 56 for sq in board.pieces(Color.BLACK, PieceType.PAWN))

    def test_empty_middle(self) -> None:
        board = Board.initial()
        assert all(board[sq] is None for sq in range(16, 48))

    def test_occupied_count(self) -> None:
        assert Board.initial().occupied_count() == 32


class TestBoardOperations:
    def test_set_and_get(self) -> None:
        board = Board()
        piece = Piece(Color.WHITE, PieceType.PAWN)
        board[E4] = piece
        assert board[E4] == piece
        assert board.is_empty(E2)
        assert board.has_piece(Color.WHITE, PieceType.PAWN)

    def test_overwrite_updates_indexes(self) -> None:
        board = Board()
        board[E4] = Piece(Color.WHITE, PieceType.PAWN)
        board[E4] = Piece(Color.BLACK, PieceType.KNIGHT)
        assert not board.has_piece(Color.WHITE, PieceType.PAWN)
        assert board.pieces(Color.BLACK, PieceType.KNIGHT) == [E4]
        assert board.all_pieces_bitboard(Color.WHITE) == 0

    def test_copy_independence(self) -> None:
        board = Board.initial()
        copy = board.copy()
        assert board == copy
        copy[E1] = None
        assert board != copy
        assert board[E1] == Piece(Color.WHITE, PieceType.KING)

    def test_king_square(self) -> None:
        board = Board.initial()
        assert board.king_square(Color.WHITE) == E1
        assert board.king_square(Color.BLACK) == E8

    def test_king_square_missing_raises(self) -> None:
        with pytest.raises(ValueError, match="No WHITE king"):
            Board().king_square(Color.WHITE)

    def test_placement_round_trip(self) -> None:
        board = Board.initial()
        rebuilt = Board.from_placement(board.placement())
        assert rebuilt == board
        assert rebuilt.king_square(Color.BLACK) == E8

    def test_iter_bitboard(self) -> None:
        assert list(iter_bitboard((1 << A1) | (1 << E4) | (1 << H8))) == [A1, E4, H8]

    def test_repr_not_empty(self) -> None:
        text = repr(Board.initial())
        assert "K" in text
        assert "a b c d e f g h" in text
